"""Located templates: source loading, lazy compilation and engine dispatch."""

import codecs
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from viewforge.exceptions import EncodingConfigurationError, EngineExecutionError, TemplateEncodingError, ViewException
from viewforge.models.templates import TemplateReference
from viewforge.protocols import CompiledTemplate, TemplateEngineProtocol


def check_encoding(encoding: str) -> str:
    """Return the canonical codec name for ``encoding``.

    Raises:
        EncodingConfigurationError: If Python knows no such codec
    """
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        raise EncodingConfigurationError(encoding) from None


def load_source(path: Path, encoding: str) -> str:
    """Read template source from disk.

    Raises:
        EncodingConfigurationError: If the encoding name is unknown or not a text encoding
        TemplateEncodingError: If the file is not valid in that encoding
    """
    codec = check_encoding(encoding)
    try:
        return path.read_text(encoding=codec)
    except UnicodeDecodeError as e:
        raise TemplateEncodingError(str(path), encoding, str(e)) from e
    except LookupError:
        # Known codec that is not a text encoding (hex, base64, ...)
        raise EncodingConfigurationError(encoding) from None


class Template:
    """A template file bound to the engine that renders it.

    Compilation happens on first render and is kept for the lifetime of the
    object; the locator caches Template objects per view and format.
    """

    def __init__(self, reference: TemplateReference, source: str, engine: TemplateEngineProtocol):
        self.reference = reference
        self.source = source
        self.engine = engine
        self._compiled: CompiledTemplate | None = None
        self._lock = threading.Lock()

    @property
    def logical_name(self) -> str:
        return self.reference.logical_name

    @property
    def format(self) -> str:
        return self.reference.format

    @property
    def path(self) -> Path:
        return self.reference.path

    def compiled(self) -> CompiledTemplate:
        """Compiled form of the source, compiling on first use.

        Raises:
            EngineExecutionError: If the engine rejects the source
        """
        if self._compiled is None:
            with self._lock:
                if self._compiled is None:
                    try:
                        self._compiled = self.engine.compile(self.source, path=self.path, format=self.format)
                    except ViewException:
                        raise
                    except Exception as e:
                        raise EngineExecutionError(str(self.path), self.engine.name, str(e)) from e
        return self._compiled

    def render(self, context: Mapping[str, Any]) -> str:
        """Render with the engine.

        Library errors raised from inside the template (a missing partial,
        a missing local) propagate unchanged; anything else the engine
        raises is wrapped in EngineExecutionError.
        """
        compiled = self.compiled()
        try:
            return compiled.render(context)
        except ViewException:
            raise
        except Exception as e:
            raise EngineExecutionError(str(self.path), self.engine.name, str(e)) from e

    def __repr__(self) -> str:
        return f"<Template {self.logical_name!r} format={self.format!r} engine={self.engine.name!r}>"
