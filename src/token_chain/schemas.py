"""Pydantic v2 schemas for the files token-chain reads and writes."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, field_validator


# External export schemas
class ExportEntry(BaseModel):
    """One token in an external export: dotted name and string value."""

    name: StrictStr = Field(..., min_length=1)
    value: StrictStr

    @field_validator("name", mode="after")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must be a non-empty string")
        return v


class ExportDocument(BaseModel):
    """Root of an external export file."""

    tokens: list[ExportEntry]


# Registry snapshot schemas
class ChangelogRecord(BaseModel):
    """Persisted changelog entry.

    Older registries stored the previous value under ``prev``.
    """

    model_config = ConfigDict(populate_by_name=True)

    action: str = Field(..., pattern=r"^(add|update|remove)$")
    token: str = Field(..., min_length=1)
    value: str | None = None
    previous: str | None = Field(
        default=None, validation_alias=AliasChoices("previous", "prev")
    )
    recorded_at: datetime | None = None


class RegistryMeta(BaseModel):
    """Provenance of the last write.

    Registries written by the earlier Node tooling use camelCase keys
    (``generatedAt``, ``cssFile``, ``themeName``); both spellings are read.
    """

    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime = Field(
        ..., validation_alias=AliasChoices("generated_at", "generatedAt")
    )
    source: str
    stylesheet: str = Field(..., validation_alias=AliasChoices("stylesheet", "cssFile"))
    theme_name: str = Field(..., validation_alias=AliasChoices("theme_name", "themeName"))
    scope: str
    selector: str


class RegistrySnapshot(BaseModel):
    """The user theme registry as stored on disk."""

    meta: RegistryMeta | None = None
    tokens: dict[str, str] = Field(default_factory=dict)
    removed: list[str] = Field(default_factory=list)
    changelog: list[ChangelogRecord] = Field(default_factory=list)
