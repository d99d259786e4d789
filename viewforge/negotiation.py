"""Format negotiation: pick the view class that handles a requested format."""

from enum import Enum
from typing import TYPE_CHECKING, Any

from viewforge.exceptions import MissingFormatError

if TYPE_CHECKING:
    from viewforge.views.base import View


def require_format(format: Any) -> str:
    """Return the requested format or fail.

    Raises:
        MissingFormatError: If the format is missing or empty
    """
    if isinstance(format, Enum):
        format = format.value
    if format is None or not str(format).strip():
        raise MissingFormatError()
    return str(format).strip()


def is_format_variant(handler: type["View"], view_cls: type["View"]) -> bool:
    """A subclass declaring a format that still renders ``view_cls``'s template."""
    return handler.declared_format() is not None and handler.logical_name() == view_cls.logical_name()


def _find_handler(view_cls: type["View"], format: str) -> type["View"] | None:
    for handler in view_cls._format_handlers:
        if not is_format_variant(handler, view_cls):
            continue
        deeper = _find_handler(handler, format)
        if deeper is not None:
            return deeper
        if handler.declared_format() == format:
            return handler
    return None


def negotiate(view_cls: type["View"], format: str) -> type["View"]:
    """Choose the class that renders ``view_cls`` in ``format``.

    Only format variants of ``view_cls`` are candidates: subclasses that
    declare ``format`` and share its logical name. They are searched
    depth-first in declaration order, most specific first. A subclass that
    is a view of its own is never entered, so rendering a view in a format
    it has no template for falls through to template lookup and raises
    ``MissingTemplateError``.
    """
    if view_cls.declared_format() == format:
        return view_cls
    return _find_handler(view_cls, format) or view_cls
