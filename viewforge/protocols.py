"""Protocol definitions for pluggable template engines."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol


class CompiledTemplate(Protocol):
    """A template source compiled by an engine, ready to render."""

    def render(self, context: Mapping[str, Any]) -> str:
        """Render the template against a name-to-value mapping.

        Args:
            context: Values visible inside the template

        Returns:
            Rendered output
        """
        ...


class TemplateEngineProtocol(Protocol):
    """Protocol for template engines.

    An engine turns template source into a ``CompiledTemplate``. Adding a
    template language only requires an object satisfying this protocol and
    a registration against one or more file extensions.
    """

    name: str

    def compile(self, source: str, *, path: Path, format: str) -> CompiledTemplate:
        """Compile template source.

        Args:
            source: Decoded template text
            path: File the source came from (used in error messages)
            format: Output format the template produces

        Returns:
            Compiled template
        """
        ...
