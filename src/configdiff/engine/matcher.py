"""Property matching: old↔new property pairing for change detection."""

from __future__ import annotations

from dataclasses import dataclass, field

from configdiff.metadata import MetadataGroup, MetadataProperty, MetadataSnapshot


@dataclass(frozen=True)
class MatchedProperty:
    """A matched pair of old/new properties, or an unmatched property."""

    id: str
    old: MetadataProperty | None  # None = added
    new: MetadataProperty | None  # None = removed


@dataclass(frozen=True)
class MatchedGroup:
    """A matched pair of old/new groups, or an unmatched group."""

    id: str
    old: MetadataGroup | None
    new: MetadataGroup | None


@dataclass(frozen=True)
class RenameIndex:
    """Replacement links declared by deprecated properties on both sides.

    ``referrers`` maps a replacement target id to the sorted ids of the
    deprecated properties that point at it. ``moved`` holds the older
    properties whose replacement exists in the newer snapshot.
    """

    referrers: dict[str, list[str]] = field(default_factory=dict)
    moved: frozenset[str] = frozenset()

    def referenced_by(self, property_id: str) -> list[str]:
        return list(self.referrers.get(property_id, []))

    def is_linked(self, property_id: str) -> bool:
        """Whether the property is either end of a rename."""
        return property_id in self.moved or bool(self.referenced_by(property_id))


def match_properties(older: MetadataSnapshot, newer: MetadataSnapshot) -> list[MatchedProperty]:
    """Pair properties by id over the sorted union of both id sets."""
    ids = sorted(older.properties.keys() | newer.properties.keys())
    return [
        MatchedProperty(id=pid, old=older.properties.get(pid), new=newer.properties.get(pid))
        for pid in ids
    ]


def match_groups(older: MetadataSnapshot, newer: MetadataSnapshot) -> list[MatchedGroup]:
    """Pair groups by id over the sorted union of both id sets."""
    ids = sorted(older.groups.keys() | newer.groups.keys())
    return [MatchedGroup(id=gid, old=older.groups.get(gid), new=newer.groups.get(gid)) for gid in ids]


def build_rename_index(older: MetadataSnapshot, newer: MetadataSnapshot) -> RenameIndex:
    """Collect ``deprecation.replacement`` links from both snapshots.

    Targets are matched by exact id.
    """
    referrers: dict[str, set[str]] = {}
    moved: set[str] = set()
    for snapshot in (older, newer):
        for prop in snapshot.deprecated_properties():
            assert prop.deprecation is not None
            target = prop.deprecation.replacement
            if not target:
                continue
            referrers.setdefault(target, set()).add(prop.id)
            if snapshot is older and target in newer.properties:
                moved.add(prop.id)
    return RenameIndex(
        referrers={target: sorted(ids) for target, ids in referrers.items()},
        moved=frozenset(moved),
    )
