"""Change classification: takes matched properties, produces diff entries."""

from __future__ import annotations

from typing import Any, Union

from configdiff.engine.matcher import MatchedGroup, MatchedProperty, RenameIndex
from configdiff.schema import (
    CHANGED_FIELDS,
    ChangedField,
    GroupAddition,
    GroupDeletion,
    PropertyAddition,
    PropertyChange,
    PropertyDeletion,
    PropertyDeprecation,
)

PropertyEntry = Union[PropertyAddition, PropertyDeletion, PropertyDeprecation, PropertyChange]
GroupEntry = Union[GroupAddition, GroupDeletion]


def classify_changes(matches: list[MatchedProperty], renames: RenameIndex) -> list[PropertyEntry]:
    """Classify matched properties into diff entries, in match order."""
    results: list[PropertyEntry] = []

    for m in matches:
        results.extend(_classify_one(m, renames))

    return results


def classify_groups(matches: list[MatchedGroup]) -> list[GroupEntry]:
    """Classify matched groups; groups present on both sides produce nothing."""
    results: list[GroupEntry] = []
    for m in matches:
        if m.old is None and m.new is not None:
            results.append(GroupAddition(id=m.id, new=m.new))
        elif m.new is None and m.old is not None:
            results.append(GroupDeletion(id=m.id, old=m.old))
    return results


def _classify_one(m: MatchedProperty, renames: RenameIndex) -> list[PropertyEntry]:
    """Classify a single matched property pair."""
    # Added
    if m.old is None and m.new is not None:
        return [PropertyAddition(id=m.id, new=m.new)]

    # Removed; a removal that is one end of a rename is not a deletion
    if m.new is None and m.old is not None:
        if renames.is_linked(m.id):
            return []
        replacement = m.old.deprecation.replacement if m.old.deprecation else None
        return [PropertyDeletion(id=m.id, old=m.old, replacement=replacement or None)]

    # Both exist
    assert m.old is not None and m.new is not None

    # Newly deprecated supersedes every other field difference
    if m.old.deprecation is None and m.new.deprecation is not None:
        return [PropertyDeprecation(id=m.id, old=m.old, new=m.new)]

    changes: list[PropertyEntry] = []
    for name in CHANGED_FIELDS:
        old_value = getattr(m.old, name)
        new_value = getattr(m.new, name)
        if not _field_equal(name, old_value, new_value):
            changes.append(
                PropertyChange(id=m.id, field=name, old_value=old_value, new_value=new_value)
            )
    return changes


def _field_equal(name: ChangedField, old: Any, new: Any) -> bool:
    if name == "description":
        return _strip(old) == _strip(new)
    if name == "default_value":
        return json_equal(old, new)
    return bool(old == new)


def _strip(text: str | None) -> str | None:
    return text.strip() if text is not None else None


def json_equal(a: Any, b: Any) -> bool:
    """Value equality over JSON values.

    Booleans never equal numbers (``True != 1``), numbers compare by value
    (``1 == 1.0``), lists compare in order and objects by key.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(json_equal(a[k], b[k]) for k in a)
    return type(a) is type(b) and a == b
