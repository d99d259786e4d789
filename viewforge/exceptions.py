"""Custom exceptions for viewforge with structured error codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error reporting."""

    # Generic errors
    VIEW_ERROR = "VIEW_ERROR"

    # Render request errors
    MISSING_FORMAT = "MISSING_FORMAT"
    MISSING_LOCAL = "MISSING_LOCAL"

    # Template resolution errors
    MISSING_TEMPLATE = "MISSING_TEMPLATE"
    RENDER_DEPTH_EXCEEDED = "RENDER_DEPTH_EXCEEDED"

    # Encoding errors
    ENCODING_UNKNOWN = "ENCODING_UNKNOWN"
    ENCODING_DECODE_FAILED = "ENCODING_DECODE_FAILED"

    # Engine errors
    ENGINE_ERROR = "ENGINE_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"


class ViewException(Exception):
    """Base exception for view rendering errors.

    All custom exceptions inherit from this class so callers can catch
    every rendering failure with a single ``except`` clause.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VIEW_ERROR,
        details: dict[str, Any] | None = None,
    ):
        """Initialize view exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class MissingFormatError(ViewException):
    """Render call did not say which format to produce."""

    def __init__(self, message: str = "Missing format for rendering", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.MISSING_FORMAT, details=details)


class MissingTemplateError(ViewException):
    """No template resolves for a logical name and format."""

    def __init__(self, template: str, format: str, details: dict[str, Any] | None = None):
        self.template = template
        self.format = format
        super().__init__(
            f"Can't find template '{template}' for '{format}' format.",
            code=ErrorCode.MISSING_TEMPLATE,
            details={"template": template, "format": format, **(details or {})},
        )


class MissingLocalError(ViewException):
    """One or more required locals were not supplied to a render call."""

    def __init__(self, names: list[str], view: str):
        self.names = names
        self.view = view
        super().__init__(
            f"Missing required local(s) for {view}: {', '.join(names)}",
            code=ErrorCode.MISSING_LOCAL,
            details={"names": names, "view": view},
        )


class EncodingConfigurationError(ViewException):
    """The configured template encoding is not a known codec."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(
            f"unknown encoding name - {encoding}",
            code=ErrorCode.ENCODING_UNKNOWN,
            details={"encoding": encoding},
        )


class TemplateEncodingError(ViewException):
    """Template bytes could not be decoded with the configured encoding."""

    def __init__(self, path: str, encoding: str, reason: str = ""):
        self.path = path
        self.encoding = encoding
        message = f"Can't decode template '{path}' as {encoding}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            code=ErrorCode.ENCODING_DECODE_FAILED,
            details={"path": path, "encoding": encoding},
        )


class EngineExecutionError(ViewException):
    """The underlying templating engine failed while compiling or rendering."""

    def __init__(self, template: str, engine: str, reason: str):
        self.template = template
        self.engine = engine
        super().__init__(
            f"Error rendering '{template}' with {engine}: {reason}",
            code=ErrorCode.ENGINE_ERROR,
            details={"template": template, "engine": engine},
        )


class RenderDepthError(ViewException):
    """Nested partial/template rendering went deeper than allowed."""

    def __init__(self, depth: int, template: str):
        self.depth = depth
        super().__init__(
            f"Render depth {depth} exceeded while rendering '{template}'",
            code=ErrorCode.RENDER_DEPTH_EXCEEDED,
            details={"depth": depth, "template": template},
        )


class ConfigurationException(ViewException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
