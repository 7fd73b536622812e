"""Configuration metadata model: Pydantic v2 models.

One :class:`MetadataSnapshot` describes the declared groups, properties and
hints of a single release. Every model is frozen: a snapshot is built once by
the reader and only read afterwards.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    StrictStr,
    field_validator,
    model_validator,
)

DEFAULT_TYPE = "java.lang.String"

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]

_MODEL_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

# A period followed by whitespace or the end of the text.
_SENTENCE_END_RE = re.compile(r"\.(?=\s|$)")


def extract_short_description(description: str | None) -> str | None:
    """Return the first sentence of *description*.

    The lines leading up to the first sentence boundary are trimmed and joined
    with single spaces. When there is no boundary the first line is returned,
    trimmed. ``None`` stays ``None``.
    """
    if description is None:
        return None
    match = _SENTENCE_END_RE.search(description)
    if match is None:
        lines = description.splitlines()
        return lines[0].strip() if lines else ""
    sentence = description[: match.end()]
    return " ".join(line.strip() for line in sentence.splitlines() if line.strip())


class Deprecation(BaseModel):
    """Marks a property as superseded."""

    model_config = _MODEL_CONFIG

    reason: StrictStr | None = None
    replacement: StrictStr | None = None
    level: Literal["warning", "error"] = "warning"

    @field_validator("level", mode="before")
    @classmethod
    def _default_level(cls, value: Any) -> Any:
        return "warning" if value is None else value


class MetadataGroup(BaseModel):
    """A logical owner of properties (a "source" in the legacy layout)."""

    model_config = _MODEL_CONFIG

    id: NonEmptyStr
    type: StrictStr | None = None
    source_type: StrictStr | None = Field(default=None, alias="sourceType")
    source_method: StrictStr | None = Field(default=None, alias="sourceMethod")
    description: StrictStr | None = None

    @property
    def short_description(self) -> str | None:
        return extract_short_description(self.description)


class MetadataProperty(BaseModel):
    """A single configurable setting, keyed by its dotted id."""

    model_config = _MODEL_CONFIG

    id: NonEmptyStr
    name: StrictStr
    type: StrictStr = DEFAULT_TYPE
    description: StrictStr | None = None
    source_type: StrictStr | None = Field(default=None, alias="sourceType")
    source_method: StrictStr | None = Field(default=None, alias="sourceMethod")
    default_value: JsonValue = Field(default=None, alias="defaultValue")
    deprecation: Deprecation | None = None

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("name") is None and isinstance(data.get("id"), str):
            data["name"] = data["id"].rsplit(".", 1)[-1]
        if "type" in data and data["type"] is None:
            del data["type"]
        # Older metadata only carries a boolean flag
        if data.get("deprecation") is None and data.get("deprecated") is True:
            data["deprecation"] = {}
        return data

    @property
    def short_description(self) -> str | None:
        return extract_short_description(self.description)

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation is not None


class ValueHint(BaseModel):
    """A suggested value for a property."""

    model_config = _MODEL_CONFIG

    value: JsonValue
    description: StrictStr | None = None

    @property
    def short_description(self) -> str | None:
        return extract_short_description(self.description)


class ValueProvider(BaseModel):
    """A named strategy that supplies values, e.g. ``handle-as`` or ``any``."""

    model_config = _MODEL_CONFIG

    name: NonEmptyStr
    parameters: dict[str, JsonValue] = {}

    @field_validator("parameters", mode="before")
    @classmethod
    def _empty_parameters(cls, value: Any) -> Any:
        return {} if value is None else value


class MetadataHint(BaseModel):
    """Supplementary guidance for a property or one of its map keys."""

    model_config = _MODEL_CONFIG

    id: NonEmptyStr
    value_hints: tuple[ValueHint, ...] = Field(
        default=(),
        validation_alias=AliasChoices("values", "valueHints", "value_hints"),
    )
    value_providers: tuple[ValueProvider, ...] = Field(
        default=(),
        validation_alias=AliasChoices("providers", "valueProviders", "value_providers"),
    )

    @field_validator("value_hints", "value_providers", mode="before")
    @classmethod
    def _empty_collection(cls, value: Any) -> Any:
        return () if value is None else value


class MetadataSnapshot(BaseModel):
    """All metadata declared by one release."""

    model_config = ConfigDict(frozen=True)

    groups: dict[str, MetadataGroup] = {}
    properties: dict[str, MetadataProperty] = {}
    hints: tuple[MetadataHint, ...] = ()

    @model_validator(mode="after")
    def _check_keys(self) -> MetadataSnapshot:
        for key, group in self.groups.items():
            if key != group.id:
                msg = f"Group registered under '{key}' has id '{group.id}'"
                raise ValueError(msg)
        for key, prop in self.properties.items():
            if key != prop.id:
                msg = f"Property registered under '{key}' has id '{prop.id}'"
                raise ValueError(msg)
        return self

    def hints_for(self, property_id: str) -> list[MetadataHint]:
        """Hints attached to *property_id* itself or to one of its map keys."""
        prefix = f"{property_id}."
        return [h for h in self.hints if h.id == property_id or h.id.startswith(prefix)]

    def deprecated_properties(self) -> list[MetadataProperty]:
        return [p for p in self.properties.values() if p.deprecation is not None]
