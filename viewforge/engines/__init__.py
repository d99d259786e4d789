"""Template engines and the extension-to-engine registry.

Built-in engine kinds:
- ``jinja2``: Jinja2 templates; can call view methods and ``render(...)``
- ``format``: Python format strings (``{article.title}``)
- ``string``: ``$name`` placeholders via ``string.Template``

Custom engines implement ``TemplateEngineProtocol`` and are made available
to settings with ``register_engine()``.
"""

from viewforge.engines.format_string import FormatStringEngine
from viewforge.engines.jinja import JinjaEngine
from viewforge.engines.registry import EngineRegistry, available_engines, register_engine
from viewforge.engines.string_template import StringTemplateEngine

__all__ = [
    "EngineRegistry",
    "FormatStringEngine",
    "JinjaEngine",
    "StringTemplateEngine",
    "available_engines",
    "register_engine",
]
