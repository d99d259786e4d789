"""Pydantic models describing located templates."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class TemplateReference(BaseModel):
    """A template file resolved for one logical name and format."""

    model_config = ConfigDict(frozen=True)

    logical_name: str = Field(..., description="Format-independent template name, e.g. 'articles/index'")
    format: str = Field(..., description="Output format the file renders, e.g. 'html'")
    extension: str = Field(..., description="Engine extension selecting the template engine")
    path: Path = Field(..., description="Absolute path of the template file")

    @property
    def filename(self) -> str:
        """File name following the ``<name>.<format>.<extension>`` convention."""
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.parent
