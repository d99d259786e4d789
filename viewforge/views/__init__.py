"""View definitions.

Views declare which templates render which formats; presenters decorate
locals before templates see them.
"""

from viewforge.views.base import DEFAULT_LAYOUT, Layout, View
from viewforge.views.presenters import Presenter

__all__ = [
    "DEFAULT_LAYOUT",
    "Layout",
    "Presenter",
    "View",
]
