"""configdiff output schema: Pydantic v2 models."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from configdiff.metadata import MetadataGroup, MetadataProperty

ChangedField = Literal["type", "description", "default_value", "deprecation"]

# Order in which paired properties are compared.
CHANGED_FIELDS: tuple[ChangedField, ...] = ("type", "description", "default_value", "deprecation")


class PropertyAddition(BaseModel):
    """A property only present in the newer snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    new: MetadataProperty


class PropertyDeletion(BaseModel):
    """A property only present in the older snapshot.

    ``replacement`` is the property the removed one was deprecated in favor
    of, when that property does not exist in the newer snapshot either.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    old: MetadataProperty
    replacement: str | None = None


class PropertyDeprecation(BaseModel):
    """A property that became deprecated in the newer snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    old: MetadataProperty
    new: MetadataProperty


class PropertyChange(BaseModel):
    """One differing field on a property present in both snapshots."""

    model_config = ConfigDict(frozen=True)

    id: str
    field: ChangedField
    old_value: Any = None
    new_value: Any = None


class GroupAddition(BaseModel):
    """A group only present in the newer snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    new: MetadataGroup


class GroupDeletion(BaseModel):
    """A group only present in the older snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    old: MetadataGroup


class DiffResult(BaseModel):
    """Top-level diff between an older (left) and a newer (right) snapshot."""

    model_config = ConfigDict(frozen=True)

    schema_version: str = "1.0"
    left_version: str | None = None
    right_version: str | None = None
    additions: list[PropertyAddition] = []
    deletions: list[PropertyDeletion] = []
    deprecations: list[PropertyDeprecation] = []
    changes: list[PropertyChange] = []
    group_additions: list[GroupAddition] = []
    group_deletions: list[GroupDeletion] = []

    @property
    def is_empty(self) -> bool:
        return not any(self.counts().values())

    def counts(self) -> dict[str, int]:
        """Number of entries per category."""
        return {
            "additions": len(self.additions),
            "deletions": len(self.deletions),
            "deprecations": len(self.deprecations),
            "changes": len(self.changes),
            "group_additions": len(self.group_additions),
            "group_deletions": len(self.group_deletions),
        }


def export_json_schema() -> str:
    """Export the JSON schema as a string."""
    return json.dumps(DiffResult.model_json_schema(), indent=2)
