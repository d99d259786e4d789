"""Format-string template engine using string.Formatter."""

import string
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from markupsafe import escape

from viewforge.config import ViewSettings


class _BlankDefaults(dict):
    """Context mapping where unbound names read as an empty string."""

    def __missing__(self, key: str) -> str:
        return ""


class EscapingFormatter(string.Formatter):
    """Formatter that HTML-escapes every replacement field.

    Values that are already markup (``__html__``) are inserted as-is.
    """

    def format_field(self, value: Any, format_spec: str) -> str:
        if hasattr(value, "__html__") and not format_spec:
            return value.__html__()
        return escape(super().format_field(value, format_spec))


class FormatStringCompiledTemplate:
    """A ``{name}`` / ``{name.attr}`` template."""

    def __init__(self, source: str, formatter: string.Formatter):
        self._source = source
        self._formatter = formatter

    def render(self, context: Mapping[str, Any]) -> str:
        return self._formatter.vformat(self._source, (), _BlankDefaults(context))


class FormatStringEngine:
    """Render Python format-string templates.

    Field names support attribute and index access (``{article.title}``,
    ``{tags[0]}``) and format specs (``{price:.2f}``). Fields are escaped
    for formats listed in ``ViewSettings.autoescape_formats``.
    """

    name = "format"

    def __init__(self, settings: ViewSettings):
        self._autoescape_formats = frozenset(settings.autoescape_formats)
        self._formatter = string.Formatter()
        self._escaping_formatter = EscapingFormatter()

    def formatter(self, format: str) -> string.Formatter:
        """Formatter used for templates of the given format."""
        return self._escaping_formatter if format in self._autoescape_formats else self._formatter

    def compile(self, source: str, *, path: Path, format: str) -> FormatStringCompiledTemplate:
        formatter = self.formatter(format)
        # Parse eagerly so malformed fields fail at compile time.
        list(formatter.parse(source))
        return FormatStringCompiledTemplate(source, formatter)
