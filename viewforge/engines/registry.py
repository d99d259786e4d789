"""Engine registry mapping template file extensions to engines."""

from viewforge.config import ViewSettings
from viewforge.engines.format_string import FormatStringEngine
from viewforge.engines.jinja import JinjaEngine
from viewforge.engines.string_template import StringTemplateEngine
from viewforge.exceptions import ConfigurationException, ErrorCode
from viewforge.logging_config import get_logger, log_with_context
from viewforge.protocols import TemplateEngineProtocol

logger = get_logger(__name__)

# Engine kinds available to ``ViewSettings.engines``
_ENGINE_KINDS: dict[str, type] = {
    "jinja2": JinjaEngine,
    "format": FormatStringEngine,
    "string": StringTemplateEngine,
}


def register_engine(kind: str, engine_class: type) -> None:
    """Register a template engine kind for use in ``ViewSettings.engines``.

    Args:
        kind: Engine identifier referenced from settings
        engine_class: Class implementing TemplateEngineProtocol, constructed with the settings
    """
    _ENGINE_KINDS[kind] = engine_class


def available_engines() -> list[str]:
    """Sorted names of all registered engine kinds."""
    return sorted(_ENGINE_KINDS)


class EngineRegistry:
    """Maps file extensions to template engines.

    Extension order is registration order; the locator tries extensions in
    this order when several files exist for the same name and format.
    """

    def __init__(self):
        self._engines: dict[str, TemplateEngineProtocol] = {}

    @classmethod
    def from_settings(cls, settings: ViewSettings) -> "EngineRegistry":
        """Build a registry from ``settings.engines``.

        One engine instance is created per kind and shared by its extensions.

        Raises:
            ConfigurationException: If an extension maps to an unknown engine kind
        """
        registry = cls()
        instances: dict[str, TemplateEngineProtocol] = {}
        for extension, kind in settings.engines.items():
            if kind not in _ENGINE_KINDS:
                raise ConfigurationException(
                    f"Unknown template engine '{kind}' for extension '{extension}'. "
                    f"Available: {', '.join(available_engines())}",
                    code=ErrorCode.CONFIG_INVALID,
                    details={"extension": extension, "engine": kind},
                )
            if kind not in instances:
                instances[kind] = _ENGINE_KINDS[kind](settings)
            registry.register(extension, instances[kind])
        return registry

    def register(self, extension: str, engine: TemplateEngineProtocol) -> None:
        """Register an engine for a file extension (leading dot optional)."""
        extension = extension.lstrip(".")
        self._engines[extension] = engine
        log_with_context(
            logger,
            "debug",
            "Template engine registered",
            extension=extension,
            engine=engine.name,
            event_type="engine_registered",
        )

    def get(self, extension: str) -> TemplateEngineProtocol:
        """Engine for an extension.

        Raises:
            ConfigurationException: If nothing is registered for the extension
        """
        try:
            return self._engines[extension.lstrip(".")]
        except KeyError:
            raise ConfigurationException(
                f"No template engine registered for extension '{extension}'",
                code=ErrorCode.CONFIG_INVALID,
                details={"extension": extension},
            ) from None

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(self._engines)

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and extension.lstrip(".") in self._engines

    def __len__(self) -> int:
        return len(self._engines)
