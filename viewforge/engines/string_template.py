"""Concise ``$name`` templates using string.Template."""

import string
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from markupsafe import escape

from viewforge.config import ViewSettings


class _BlankDefaults(dict):
    def __missing__(self, key: str) -> str:
        return ""


class _EscapedDefaults(_BlankDefaults):
    def __getitem__(self, key: str) -> str:
        return escape(super().__getitem__(key))


class StringCompiledTemplate:
    def __init__(self, template: string.Template, autoescape: bool):
        self._template = template
        self._context_class = _EscapedDefaults if autoescape else _BlankDefaults

    def render(self, context: Mapping[str, Any]) -> str:
        return self._template.substitute(self._context_class(context))


class StringTemplateEngine:
    """Render ``$name`` / ``${name}`` templates.

    Values are escaped for formats listed in ``ViewSettings.autoescape_formats``.
    """

    name = "string"

    def __init__(self, settings: ViewSettings):
        self._autoescape_formats = frozenset(settings.autoescape_formats)

    def compile(self, source: str, *, path: Path, format: str) -> StringCompiledTemplate:
        template = string.Template(source)
        if not template.is_valid():
            raise ValueError(f"Invalid placeholder in string template {path.name}")
        return StringCompiledTemplate(template, format in self._autoescape_formats)
