"""Render context construction.

Builds the name-to-value mapping a template sees: caller locals (decorated
where the view asks for it), the view's public methods, and a handful of
reserved names (``view``, ``format``, ``locals``, ``render``).
"""

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from jinja2 import ChainableUndefined

from viewforge.exceptions import MissingLocalError

if TYPE_CHECKING:
    from viewforge.views.base import Layout, View

RESERVED_NAMES = ("view", "format", "locals", "render")


class Locals(Mapping[str, Any]):
    """Immutable mapping of locals for one render call.

    Templates check for optional locals with ``'name' in locals`` (or
    ``locals.get('name')``) without raising when they are absent.
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values or {})

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def merge(self, **extra: Any) -> "Locals":
        """New Locals with ``extra`` layered over these values."""
        return Locals({**self._values, **extra})

    def __repr__(self) -> str:
        return f"Locals({self._values!r})"


def check_required(view_cls: type["View"], locals: Mapping[str, Any]) -> None:
    """Fail fast when required locals are missing.

    Raises:
        MissingLocalError: Listing every missing name, in declaration order
    """
    missing = [name for name in view_cls.required_locals if name not in locals]
    if missing:
        raise MissingLocalError(missing, view_cls.__qualname__)


def decorate(view_cls: type["View"], locals: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the view's decorators to matching locals.

    Returns:
        Plain dict of locals, decorated values in place of the originals
    """
    decorated = dict(locals)
    for name, presenter in view_cls.merged_decorators().items():
        if name in decorated:
            decorated[name] = presenter(decorated[name])
    return decorated


def build_context(
    view: "View",
    render: Callable[..., str],
    locals: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the context for a view template.

    Precedence, lowest first: view methods, locals, reserved names. Declared
    optional locals the caller left out are bound to ``ChainableUndefined``,
    which is falsy, renders as an empty string and allows attribute chains
    (``annotations.written``) in every engine.

    Args:
        view: View instance being rendered
        render: Callable templates use for partials and nested templates
        locals: Locals to bind instead of ``view.locals`` (used for partials)

    Returns:
        Complete template context
    """
    context: dict[str, Any] = {name: getattr(view, name) for name in view.exposures()}
    locals = view.locals if locals is None else locals
    context.update(decorate(type(view), locals))
    for name in type(view).optional_locals:
        if name not in locals:
            context.setdefault(name, ChainableUndefined(name=name))
    context.update(view=view, format=view.format, locals=locals, render=render)
    return context


def build_layout_context(layout: "Layout", view_context: Mapping[str, Any]) -> dict[str, Any]:
    """Build the context for a layout template.

    The layout sees everything the view template saw, its own public
    methods on top, and the rendered body as ``content``.
    """
    context: dict[str, Any] = dict(view_context)
    context.update({name: getattr(layout, name) for name in layout.exposures()})
    context.update(layout=layout, content=layout.content)
    return context
