"""Template lookup across search roots, logical names and engine extensions.

Files follow the ``<logical_name>.<format>.<extension>`` convention; partial
files prefix their base name with an underscore (``shared/_form.html.jinja``).
Lookup only ever tests exact paths, so a same-named subdirectory somewhere
else (``members/articles/index``) cannot shadow ``articles/index``.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from viewforge.cache import TemplateCache, cached
from viewforge.config import ViewSettings
from viewforge.engines.registry import EngineRegistry
from viewforge.exceptions import MissingTemplateError
from viewforge.logging_config import get_logger, log_with_context
from viewforge.models.templates import TemplateReference
from viewforge.template import Template, load_source

if TYPE_CHECKING:
    from viewforge.views.base import View

logger = get_logger(__name__)


def partial_path(name: str) -> str:
    """Logical partial name to its file stem (``shared/form`` -> ``shared/_form``)."""
    directory, _, basename = name.strip("/").rpartition("/")
    return f"{directory}/_{basename}" if directory else f"_{basename}"


def _within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


class TemplateLocator:
    """Resolves view, layout and partial templates to files.

    Resolutions are cached for the process lifetime in a TemplateCache.
    """

    def __init__(self, settings: ViewSettings, registry: EngineRegistry, cache: TemplateCache | None = None):
        self.settings = settings
        self.registry = registry
        self.cache = cache or TemplateCache()

    def _absolute(self, root: Path) -> Path:
        return root if root.is_absolute() else self.settings.base_dir / root

    def search_roots(self, view_cls: type["View"]) -> tuple[Path, ...]:
        """Ordered roots for a view: its declared roots (subclass first), then configured roots."""

        def compute() -> tuple[Path, ...]:
            roots: dict[Path, None] = {}
            for root in view_cls.declared_roots():
                roots.setdefault(self._absolute(root), None)
            for root in self.settings.resolved_roots():
                roots.setdefault(root, None)
            return tuple(roots)

        return cached(self.cache, ("roots", view_cls), compute)

    def find(self, roots: tuple[Path, ...], stem: str, format: str) -> tuple[Path, str] | None:
        """First existing ``<root>/<stem>.<format>.<ext>``, with its extension."""
        for root in roots:
            for extension in self.registry.extensions:
                path = root / f"{stem}.{format}.{extension}"
                if path.is_file():
                    return path, extension
        return None

    def load(self, logical_name: str, format: str, path: Path, extension: str, encoding: str) -> Template:
        """Read and wrap a template file."""
        reference = TemplateReference(logical_name=logical_name, format=format, extension=extension, path=path)
        template = Template(reference, load_source(path, encoding), self.registry.get(extension))
        log_with_context(
            logger,
            "debug",
            "Template located",
            template=logical_name,
            render_format=format,
            path=str(path),
            engine=template.engine.name,
            event_type="template_located",
        )
        return template

    def encoding_for(self, view_cls: type["View"]) -> str:
        return view_cls.encoding or self.settings.default_encoding

    def locate(self, view_cls: type["View"], format: str) -> Template:
        """Template for a view class and format.

        Each logical name in the view's override chain is tried against every
        search root before moving on to the next (less specific) name.

        Raises:
            MissingTemplateError: If no file matches
        """

        def compute() -> Template:
            roots = self.search_roots(view_cls)
            for logical_name in view_cls.logical_names():
                found = self.find(roots, logical_name, format)
                if found is not None:
                    path, extension = found
                    return self.load(logical_name, format, path, extension, self.encoding_for(view_cls))
            raise MissingTemplateError(
                view_cls.logical_name(),
                format,
                details={"searched": [str(root) for root in roots], "view": view_cls.__qualname__},
            )

        return cached(self.cache, ("view", view_cls, format), compute)

    def locate_template(self, name: str, format: str, roots: tuple[Path, ...], encoding: str) -> Template:
        """Template by logical name, used for layouts and ``render(template=...)``.

        Raises:
            MissingTemplateError: If no file matches
        """
        name = name.strip("/")

        def compute() -> Template:
            found = self.find(roots, name, format)
            if found is None:
                raise MissingTemplateError(name, format, details={"searched": [str(root) for root in roots]})
            path, extension = found
            return self.load(name, format, path, extension, encoding)

        return cached(self.cache, ("template", name, format, roots, encoding), compute)

    def partial_bases(self, base_dir: Path, roots: tuple[Path, ...]) -> tuple[Path, ...]:
        """Directories a partial is looked up from.

        The calling template's directory comes first, then each parent up to
        the root containing it, then the remaining roots.
        """
        bases: dict[Path, None] = {}
        for root in roots:
            if _within(base_dir, root):
                directory = base_dir
                while directory != root:
                    bases.setdefault(directory, None)
                    directory = directory.parent
            bases.setdefault(root, None)
        return tuple(bases)

    def locate_partial(self, name: str, format: str, base_dir: Path, roots: tuple[Path, ...], encoding: str) -> Template:
        """Partial template by logical name relative to the calling template.

        Raises:
            MissingTemplateError: Naming the partial itself, not its caller
        """
        name = name.strip("/")

        def compute() -> Template:
            bases = self.partial_bases(base_dir, roots)
            found = self.find(bases, partial_path(name), format)
            if found is None:
                raise MissingTemplateError(name, format, details={"searched": [str(base) for base in bases]})
            path, extension = found
            return self.load(name, format, path, extension, encoding)

        return cached(self.cache, ("partial", name, format, base_dir, roots, encoding), compute)

    def clear(self) -> None:
        """Forget every cached resolution."""
        self.cache.clear()
