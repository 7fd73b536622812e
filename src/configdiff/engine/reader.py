"""Metadata JSON reading and validation."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, BinaryIO, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from configdiff.metadata import (
    MetadataGroup,
    MetadataHint,
    MetadataProperty,
    MetadataSnapshot,
    extract_short_description,
)

# Re-exported so callers only need the reader for description handling
__all__ = [
    "MalformedMetadataError",
    "extract_short_description",
    "read",
    "read_bytes",
    "read_text",
]

logger = logging.getLogger(__name__)

ROOT_PATH = "$"

TOO_DEEP = "Document nested too deeply"

_Entry = TypeVar("_Entry", MetadataGroup, MetadataProperty)


class MalformedMetadataError(ValueError):
    """A metadata document could not be turned into a snapshot.

    ``path`` points at the offending location, e.g. ``$.properties[2].id``.
    ``version`` is filled in when the document belongs to a named release.
    """

    def __init__(self, message: str, path: str = ROOT_PATH, version: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.version = version

    def __str__(self) -> str:
        prefix = f"{self.version}: " if self.version else ""
        return f"{prefix}{self.path}: {self.message}"

    def for_version(self, version: str) -> MalformedMetadataError:
        """Copy of this error attributed to *version*."""
        return MalformedMetadataError(self.message, self.path, version=version)


class _MetadataDocument(BaseModel):
    """Top-level layout, covering both the current and the legacy key names."""

    model_config = ConfigDict(extra="ignore")

    groups: list[MetadataGroup] = []
    sources: list[MetadataGroup] = []
    properties: list[MetadataProperty] = []
    items: list[MetadataProperty] = []
    hints: list[MetadataHint] = []

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def read(stream: BinaryIO, encoding: str) -> MetadataSnapshot:
    """Read a snapshot from a binary stream.

    The stream is consumed but not closed; whoever opened it closes it.

    Raises:
        MalformedMetadataError: The content is not valid metadata.
    """
    return read_bytes(stream.read(), encoding)


def read_bytes(data: bytes, encoding: str = "utf-8") -> MetadataSnapshot:
    """Decode *data* with *encoding* and read it as a metadata document."""
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        msg = f"Cannot decode metadata as {encoding}: {exc.reason} at byte {exc.start}"
        raise MalformedMetadataError(msg) from exc
    except LookupError as exc:
        raise MalformedMetadataError(f"Unknown encoding: {encoding}") from exc
    return read_text(text)


def read_text(text: str) -> MetadataSnapshot:
    """Read an already decoded metadata document."""
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        raise MalformedMetadataError(msg) from exc
    except RecursionError as exc:
        raise MalformedMetadataError(TOO_DEEP) from exc

    if not isinstance(raw, dict):
        raise MalformedMetadataError(f"Expected a JSON object, got {_json_type(raw)}")

    try:
        document = _MetadataDocument.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise MalformedMetadataError(first["msg"], format_location(first["loc"])) from exc
    except RecursionError as exc:
        raise MalformedMetadataError(TOO_DEEP) from exc

    snapshot = MetadataSnapshot(
        groups=_index([("groups", document.groups), ("sources", document.sources)]),
        properties=_index([("properties", document.properties), ("items", document.items)]),
        hints=tuple(document.hints),
    )
    logger.debug(
        "Read metadata: %d groups, %d properties, %d hints",
        len(snapshot.groups),
        len(snapshot.properties),
        len(snapshot.hints),
    )
    return snapshot


def format_location(loc: Sequence[int | str]) -> str:
    """Render a pydantic error location as ``$.key[index].field``."""
    path = ROOT_PATH
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _index(sections: list[tuple[str, list[_Entry]]]) -> dict[str, _Entry]:
    """Key entries by id, rejecting duplicates across all *sections*."""
    index: dict[str, _Entry] = {}
    for section, entries in sections:
        for i, entry in enumerate(entries):
            if entry.id in index:
                raise MalformedMetadataError(
                    f"Duplicate id '{entry.id}'",
                    f"{ROOT_PATH}.{section}[{i}].id",
                )
            index[entry.id] = entry
    return index


def _reject_constant(name: str) -> Any:
    raise MalformedMetadataError(f"Invalid JSON constant '{name}'")


def _json_type(value: Any) -> str:
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "null"
