"""Jinja2 template engine."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, Template, Undefined

from viewforge.config import ViewSettings


class JinjaCompiledTemplate:
    """Compiled Jinja2 template."""

    def __init__(self, template: Template):
        self._template = template

    def render(self, context: Mapping[str, Any]) -> str:
        return self._template.render(dict(context))


class JinjaEngine:
    """Jinja2 engine with per-format autoescaping.

    Templates may call view methods and ``render(...)`` directly. Undefined
    names use Jinja2's default ``Undefined`` so optional locals that were not
    supplied are falsy instead of raising.
    """

    name = "jinja2"

    def __init__(self, settings: ViewSettings):
        self._autoescape_formats = frozenset(settings.autoescape_formats)
        self._environments = {
            escape: Environment(
                autoescape=escape,
                undefined=Undefined,
                keep_trailing_newline=False,
            )
            for escape in (True, False)
        }

    def environment(self, format: str) -> Environment:
        """Environment used for templates of the given format."""
        return self._environments[format in self._autoescape_formats]

    def compile(self, source: str, *, path: Path, format: str) -> JinjaCompiledTemplate:
        environment = self.environment(format)
        code = environment.compile(source, name=path.name, filename=str(path))
        template = environment.template_class.from_code(environment, code, environment.make_globals(None))
        return JinjaCompiledTemplate(template)
