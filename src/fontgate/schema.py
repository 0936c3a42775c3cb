"""Pydantic v2 models matching the Google Fonts Developer API webfonts list."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FontFiles(BaseModel):
    """Named file URLs for a family's variants.

    ``regular`` and ``italic`` are modelled explicitly; any other variant
    keys sent by the API (``"700"``, ``"700italic"`` ...) are kept as extras.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    regular: str | None = None
    italic: str | None = None


class CatalogEntry(BaseModel):
    """A single family in the catalog."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    family: str
    variants: list[str] = Field(default_factory=list)
    subsets: list[str] = Field(default_factory=list)
    version: str = ""
    last_modified: str = Field(default="", alias="lastModified")
    files: FontFiles = Field(default_factory=FontFiles)
    category: str = ""
    kind: str = ""
    menu: str = ""

    @field_validator("family")
    @classmethod
    def family_not_empty(cls, v: str) -> str:
        if not v:
            msg = "Catalog entry family must not be empty"
            raise ValueError(msg)
        return v

    def to_json(self) -> dict:
        """Dump to a dict with the API's camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class CatalogResponse(BaseModel):
    """Top-level webfonts list response: ``{"kind": ..., "items": [...]}``."""

    kind: str = ""
    items: list[CatalogEntry] = Field(default_factory=list)
