"""viewforge models"""

from viewforge.models.render import RenderRequest
from viewforge.models.templates import TemplateReference

__all__ = [
    "RenderRequest",
    "TemplateReference",
]
