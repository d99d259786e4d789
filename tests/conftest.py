"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace

import pytest
from fixtures.views import TEMPLATES_DIR

from viewforge import ViewRenderer, ViewSettings
from viewforge.engines import EngineRegistry


@pytest.fixture
def settings():
    """ViewSettings pointing at the fixture templates."""
    return ViewSettings(template_roots=[TEMPLATES_DIR], base_dir=TEMPLATES_DIR.parent)


@pytest.fixture
def registry(settings):
    """Engine registry built from the default engine mapping."""
    return EngineRegistry.from_settings(settings)


@pytest.fixture
def renderer(settings):
    """Renderer over the fixture templates."""
    return ViewRenderer(settings)


@pytest.fixture
def make_renderer():
    """Factory for renderers with custom settings overrides."""

    def factory(**overrides):
        values = {"template_roots": [TEMPLATES_DIR], "base_dir": TEMPLATES_DIR.parent, **overrides}
        return ViewRenderer(ViewSettings(**values))

    return factory


@pytest.fixture
def articles():
    """A single article, like the ones passed to article views."""
    return [SimpleNamespace(title="Man on the Moon!")]


@pytest.fixture
def template_tree(tmp_path):
    """Write templates under tmp_path from a {relative_path: content} mapping."""

    def factory(files):
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return factory
