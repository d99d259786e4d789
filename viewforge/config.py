from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENGINES: dict[str, str] = {
    "jinja": "jinja2",
    "j2": "jinja2",
    "fmt": "format",
    "tmpl": "string",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ViewSettings(BaseSettings):
    """Process-wide rendering settings.

    Settings are frozen: build one instance before rendering starts and pass
    it to every ``ViewRenderer``. Values may come from keyword arguments,
    ``VIEWFORGE_*`` environment variables or a ``.env`` file.

    An unknown codec name in ``default_encoding`` is reported when a template
    is loaded.
    """

    template_roots: list[Path] = Field(
        default_factory=lambda: [Path("templates")],
        description="Ordered template root directories (highest priority first)",
    )
    base_dir: Path = Field(default_factory=Path.cwd, description="Directory relative roots resolve against")
    default_encoding: str = Field(default="utf-8", min_length=1, description="Encoding used to read templates")

    layout: str | None = Field(default=None, description="Layout applied to views that do not choose one")
    layouts_dir: str = Field(default="layouts", description="Directory (under each root) holding layouts")

    engines: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ENGINES),
        description="Template file extension -> engine kind",
    )
    autoescape_formats: list[str] = Field(
        default_factory=lambda: ["html", "xml"],
        description="Formats whose output is HTML-escaped by escaping engines",
    )
    max_render_depth: int = Field(default=32, ge=1, description="Maximum partial nesting depth")

    log_level: str = Field(default="INFO", description="Library log level")

    model_config = SettingsConfigDict(
        env_prefix="VIEWFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        validate_default=True,
    )

    @field_validator("template_roots", mode="after")
    @classmethod
    def validate_template_roots(cls, v: list[Path]) -> list[Path]:
        """Ensure at least one template root is configured."""
        if not v:
            raise ValueError("template_roots must contain at least one directory")
        return v

    @field_validator("engines", mode="after")
    @classmethod
    def validate_engines(cls, v: dict[str, str]) -> dict[str, str]:
        """Normalize extensions (no leading dot) and reject empty mappings."""
        if not v:
            raise ValueError("engines must map at least one extension")
        return {ext.lstrip("."): kind for ext, kind in v.items()}

    @field_validator("layouts_dir", mode="after")
    @classmethod
    def validate_layouts_dir(cls, v: str) -> str:
        return v.strip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level names a standard logging level."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    def resolved_roots(self) -> tuple[Path, ...]:
        """Template roots as absolute paths, in priority order."""
        return tuple(root if root.is_absolute() else self.base_dir / root for root in self.template_roots)


# Singleton settings instance (cached for performance)
_settings_instance: ViewSettings | None = None


def get_settings() -> ViewSettings:
    """Get the process-wide ViewSettings instance.

    The instance is created on first use, reading the environment once.

    Returns:
        Cached ViewSettings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = ViewSettings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next ``get_settings()`` re-reads them."""
    global _settings_instance
    _settings_instance = None
