"""Tests for template engines and the engine registry."""

from pathlib import Path

import pytest
from markupsafe import Markup

import viewforge.engines.registry as registry_module
from viewforge.config import ViewSettings
from viewforge.engines import (
    EngineRegistry,
    FormatStringEngine,
    JinjaEngine,
    StringTemplateEngine,
    available_engines,
    register_engine,
)
from viewforge.exceptions import ConfigurationException, ErrorCode


class UpperEngine:
    """Toy engine that upper-cases its source."""

    name = "upper"

    def __init__(self, settings):
        self.settings = settings

    def compile(self, source, *, path, format):
        return UpperCompiled(source)


class UpperCompiled:
    def __init__(self, source):
        self.source = source

    def render(self, context):
        return self.source.upper()


@pytest.fixture
def engine_kinds(monkeypatch):
    """Isolate register_engine() calls to one test."""
    kinds = dict(registry_module._ENGINE_KINDS)
    monkeypatch.setattr(registry_module, "_ENGINE_KINDS", kinds)
    return kinds


class TestEngineRegistry:
    """Tests for EngineRegistry."""

    def test_from_settings_uses_default_extensions(self, registry):
        """Test default settings register the built-in extensions in order."""
        assert registry.extensions == ("jinja", "j2", "fmt", "tmpl")
        assert len(registry) == 4

    def test_extensions_share_one_engine_instance_per_kind(self, registry):
        assert registry.get("jinja") is registry.get("j2")
        assert isinstance(registry.get("jinja"), JinjaEngine)
        assert isinstance(registry.get("fmt"), FormatStringEngine)
        assert isinstance(registry.get("tmpl"), StringTemplateEngine)

    def test_get_accepts_leading_dot(self, registry):
        assert registry.get(".fmt") is registry.get("fmt")
        assert ".jinja" in registry

    def test_get_unknown_extension_raises(self, registry):
        """Test looking up an unregistered extension raises ConfigurationException."""
        with pytest.raises(ConfigurationException) as exc_info:
            registry.get("haml")

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
        assert "haml" not in registry

    def test_unknown_engine_kind_in_settings_raises(self):
        """Test settings naming an unknown engine kind fail at registry build time."""
        settings = ViewSettings(engines={"haml": "haml"})

        with pytest.raises(ConfigurationException) as exc_info:
            EngineRegistry.from_settings(settings)

        assert exc_info.value.details == {"extension": "haml", "engine": "haml"}
        assert "jinja2" in exc_info.value.message

    def test_register_custom_engine(self, engine_kinds):
        """Test a registered engine kind can be referenced from settings."""
        register_engine("upper", UpperEngine)
        settings = ViewSettings(engines={"up": "upper", "jinja": "jinja2"})

        registry = EngineRegistry.from_settings(settings)

        assert "upper" in available_engines()
        assert registry.extensions == ("up", "jinja")
        engine = registry.get("up")
        assert engine.settings is settings
        assert engine.compile("hi", path=Path("x.html.up"), format="html").render({}) == "HI"

    def test_register_on_instance(self):
        registry = EngineRegistry()
        engine = UpperEngine(None)

        registry.register(".up", engine)

        assert registry.get("up") is engine


class TestJinjaEngine:
    """Tests for the Jinja2 engine."""

    def test_autoescape_follows_format(self):
        engine = JinjaEngine(ViewSettings())

        assert engine.environment("html").autoescape is True
        assert engine.environment("xml").autoescape is True
        assert engine.environment("json").autoescape is False

    def test_renders_with_escaping_for_html(self):
        engine = JinjaEngine(ViewSettings())
        compiled = engine.compile("Hi {{ name }}", path=Path("hi.html.jinja"), format="html")

        assert compiled.render({"name": "<b>"}) == "Hi &lt;b&gt;"

    def test_renders_without_escaping_for_text(self):
        engine = JinjaEngine(ViewSettings())
        compiled = engine.compile("Hi {{ name }}", path=Path("hi.txt.jinja"), format="txt")

        assert compiled.render({"name": "<b>"}) == "Hi <b>"

    def test_undefined_names_are_falsy(self):
        """Test optional locals that were not passed do not raise."""
        engine = JinjaEngine(ViewSettings())
        compiled = engine.compile("{% if note %}{{ note }}{% else %}none{% endif %}", path=Path("n.html.jinja"), format="html")

        assert compiled.render({}) == "none"

    def test_custom_autoescape_formats(self):
        engine = JinjaEngine(ViewSettings(autoescape_formats=["svg"]))

        assert engine.environment("svg").autoescape is True
        assert engine.environment("html").autoescape is False


class TestFormatStringEngine:
    """Tests for the format-string engine."""

    def test_renders_attribute_access(self):
        engine = FormatStringEngine(ViewSettings())
        compiled = engine.compile("<h1>{person.name}</h1> {price:.2f}", path=Path("c.html.fmt"), format="html")

        class Person:
            name = "Ada"

        assert compiled.render({"person": Person(), "price": 3}) == "<h1>Ada</h1> 3.00"

    def test_missing_names_render_blank(self):
        engine = FormatStringEngine(ViewSettings())
        compiled = engine.compile("[{missing}]", path=Path("c.html.fmt"), format="html")

        assert compiled.render({}) == "[]"

    def test_malformed_source_fails_at_compile(self):
        engine = FormatStringEngine(ViewSettings())

        with pytest.raises(ValueError):
            engine.compile("{unclosed", path=Path("c.html.fmt"), format="html")

    def test_escapes_fields_for_html(self):
        engine = FormatStringEngine(ViewSettings())
        compiled = engine.compile("<h1>{name}</h1>{price:.1f}", path=Path("c.html.fmt"), format="html")

        assert compiled.render({"name": "<b>Ada</b>", "price": 2}) == "<h1>&lt;b&gt;Ada&lt;/b&gt;</h1>2.0"

    def test_markup_fields_are_not_escaped_twice(self):
        """Test rendered partials and other markup pass through unchanged."""
        engine = FormatStringEngine(ViewSettings())
        compiled = engine.compile("<div>{body}</div>", path=Path("c.html.fmt"), format="html")

        assert compiled.render({"body": Markup("<p>hi</p>")}) == "<div><p>hi</p></div>"

    def test_does_not_escape_other_formats(self):
        engine = FormatStringEngine(ViewSettings())
        compiled = engine.compile("{name}", path=Path("c.txt.fmt"), format="txt")

        assert compiled.render({"name": "<b>"}) == "<b>"


class TestStringTemplateEngine:
    """Tests for the $name engine."""

    def test_renders_placeholders(self):
        engine = StringTemplateEngine(ViewSettings())
        compiled = engine.compile("<h1>$desk</h1>${suffix}!", path=Path("d.html.tmpl"), format="html")

        assert compiled.render({"desk": "Oak", "suffix": "wood"}) == "<h1>Oak</h1>wood!"

    def test_missing_names_render_blank(self):
        engine = StringTemplateEngine(ViewSettings())
        compiled = engine.compile("[$missing]", path=Path("d.html.tmpl"), format="html")

        assert compiled.render({}) == "[]"

    def test_escapes_values_for_html(self):
        engine = StringTemplateEngine(ViewSettings())
        compiled = engine.compile("<h1>$desk</h1>$body", path=Path("d.html.tmpl"), format="html")

        rendered = compiled.render({"desk": "<i>Oak</i>", "body": Markup("<p>ok</p>")})

        assert rendered == "<h1>&lt;i&gt;Oak&lt;/i&gt;</h1><p>ok</p>"

    def test_does_not_escape_other_formats(self):
        engine = StringTemplateEngine(ViewSettings())
        compiled = engine.compile("$desk", path=Path("d.json.tmpl"), format="json")

        assert compiled.render({"desk": "<i>"}) == "<i>"

    def test_invalid_placeholder_fails_at_compile(self):
        engine = StringTemplateEngine(ViewSettings())

        with pytest.raises(ValueError, match="Invalid placeholder"):
            engine.compile("costs $ 5", path=Path("d.html.tmpl"), format="html")
