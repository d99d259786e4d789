"""viewforge: view rendering with format negotiation, layouts and partials."""

from importlib.metadata import PackageNotFoundError, version

from viewforge.config import ViewSettings, get_settings
from viewforge.context import Locals
from viewforge.engines import EngineRegistry, register_engine
from viewforge.exceptions import (
    EncodingConfigurationError,
    EngineExecutionError,
    ErrorCode,
    MissingFormatError,
    MissingLocalError,
    MissingTemplateError,
    RenderDepthError,
    TemplateEncodingError,
    ViewException,
)
from viewforge.rendering import ViewRenderer
from viewforge.views import DEFAULT_LAYOUT, Layout, Presenter, View

try:
    __version__ = version("viewforge")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "DEFAULT_LAYOUT",
    "EncodingConfigurationError",
    "EngineExecutionError",
    "EngineRegistry",
    "ErrorCode",
    "Layout",
    "Locals",
    "MissingFormatError",
    "MissingLocalError",
    "MissingTemplateError",
    "Presenter",
    "RenderDepthError",
    "TemplateEncodingError",
    "View",
    "ViewException",
    "ViewRenderer",
    "ViewSettings",
    "get_settings",
    "register_engine",
]
