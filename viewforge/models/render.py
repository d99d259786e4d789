"""Pydantic model for a single render call."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from viewforge.negotiation import require_format


class RenderRequest(BaseModel):
    """Requested format plus the locals handed to a view."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    format: str = Field(..., min_length=1, description="Requested output format")
    locals: dict[str, Any] = Field(default_factory=dict, description="Caller-supplied locals")

    @classmethod
    def build(cls, params: Mapping[str, Any] | None = None, **kwargs: Any) -> "RenderRequest":
        """Build a request from a params mapping and/or keyword locals.

        The ``format`` entry is taken out of the merged values; everything else
        becomes a local. Keyword arguments win over the mapping.

        Raises:
            MissingFormatError: If no non-empty format was given
        """
        values: dict[str, Any] = {**(params or {}), **kwargs}
        format = require_format(values.pop("format", None))
        return cls(format=format, locals=values)
