"""View and layout base classes.

A view class declares which template renders it and how. Templates are
looked up by logical name, derived from the class's qualified name unless
``template`` is set:

    class Articles:
        class Index(View):          # -> "articles/index"
            layout = "application"

        class JsonIndex(Index):     # handles json, reuses "articles/index"
            format = "json"
"""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from viewforge.context import Locals
    from viewforge.rendering import RenderSession


class _DefaultLayout:
    def __repr__(self) -> str:
        return "DEFAULT_LAYOUT"


# Defer to ``ViewSettings.layout``
DEFAULT_LAYOUT: Any = _DefaultLayout()

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """Convert a CamelCase class name to snake_case (``OrderTemplates`` -> ``order_templates``)."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def qualname_to_path(qualname: str) -> str:
    """Turn a class ``__qualname__`` into a slash-separated logical name.

    Segments up to and including ``<locals>`` are dropped so classes defined
    inside functions are named after their own nesting only.
    """
    parts = qualname.split(".")
    if "<locals>" in parts:
        parts = parts[len(parts) - parts[::-1].index("<locals>") :]
    return "/".join(underscore(part) for part in parts)


def _public_methods(cls: type, base: type) -> tuple[str, ...]:
    """Names of public methods declared on ``cls`` or its ancestors below ``base``."""
    reserved = set(vars(base))
    names: dict[str, None] = {}
    for klass in cls.__mro__:
        if klass is base or not issubclass(klass, base):
            continue
        for name, value in vars(klass).items():
            if name.startswith("_") or name in reserved:
                continue
            if isinstance(value, staticmethod | classmethod) or callable(value):
                names.setdefault(name, None)
    return tuple(names)


class View:
    """Base class for view definitions.

    Class attributes:
        template: Explicit logical template name (e.g. ``"articles/new"``)
        format: Format this class handles when its parent is rendered
        layout: Layout name or ``Layout`` subclass; ``None`` renders bare
        root: Extra template root searched before the configured roots
        encoding: Template encoding overriding ``ViewSettings.default_encoding``
        required_locals: Locals that must be present in every render call
        optional_locals: Locals templates may use; absent ones read as blank
        decorators: Local name -> presenter applied before template access

    Overriding ``render()`` bypasses template lookup and layout; such a view
    renders for any requested format.
    """

    template: ClassVar[str | None] = None
    format: ClassVar[str | None] = None
    layout: ClassVar[Any] = DEFAULT_LAYOUT
    root: ClassVar[str | Path | None] = None
    encoding: ClassVar[str | None] = None
    required_locals: ClassVar[tuple[str, ...]] = ()
    optional_locals: ClassVar[tuple[str, ...]] = ()
    decorators: ClassVar[dict[str, Any]] = {}

    _format_handlers: ClassVar[list[type["View"]]] = []
    _exposures: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._format_handlers = []
        cls._exposures = _public_methods(cls, View)
        for parent in cls.__bases__:
            if issubclass(parent, View):
                parent._format_handlers.append(cls)

    def __init__(self, format: str, locals: "Locals", session: "RenderSession"):
        self.format = format
        self.locals = locals
        self._session = session

    @classmethod
    def declared_format(cls) -> str | None:
        """Format declared on this class itself, ignoring inherited values."""
        return vars(cls).get("format")

    @classmethod
    def logical_name(cls) -> str:
        """Format-independent template name for this view."""
        explicit = vars(cls).get("template")
        if explicit:
            return explicit.strip("/")
        if cls.declared_format() is not None:
            for parent in cls.__bases__:
                if issubclass(parent, View) and parent is not View:
                    return parent.logical_name()
        return qualname_to_path(cls.__qualname__)

    @classmethod
    def logical_names(cls) -> tuple[str, ...]:
        """Override chain: own logical name first, then each ancestor view's."""
        names: dict[str, None] = {}
        for klass in cls.__mro__:
            if klass is View or not issubclass(klass, View):
                continue
            names.setdefault(klass.logical_name(), None)
        return tuple(names)

    @classmethod
    def declared_roots(cls) -> tuple[Path, ...]:
        """``root`` attributes declared along the MRO, subclass first."""
        roots: list[Path] = []
        for klass in cls.__mro__:
            root = vars(klass).get("root")
            if root is not None and Path(root) not in roots:
                roots.append(Path(root))
        return tuple(roots)

    @classmethod
    def merged_decorators(cls) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            merged.update(vars(klass).get("decorators", {}))
        return merged

    @classmethod
    def exposures(cls) -> tuple[str, ...]:
        """Public method names visible inside templates."""
        return cls._exposures

    def render(self) -> str:
        """Render the view's template, wrapped in its layout if one applies."""
        return self._session.render_view(self)

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} format={self.format!r}>"


class Layout:
    """Base class for layouts.

    The layout template is found under ``ViewSettings.layouts_dir``. Its
    name is ``template`` if set, otherwise the class name without a
    ``Layout`` suffix (``ApplicationLayout`` -> ``"application"``). Public
    methods are callable from the layout template; ``self.view`` is the view
    being wrapped.
    """

    template: ClassVar[str | None] = None

    _exposures: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._exposures = _public_methods(cls, Layout)

    def __init__(self, view: View, content: str):
        self.view = view
        self.content = content
        self.format = view.format

    @classmethod
    def logical_name(cls) -> str:
        if cls.template:
            return cls.template.strip("/")
        name = cls.__name__
        if name.endswith("Layout") and name != "Layout":
            name = name[: -len("Layout")]
        return underscore(name)

    @classmethod
    def exposures(cls) -> tuple[str, ...]:
        return cls._exposures
