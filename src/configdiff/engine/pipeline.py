"""End-to-end pipeline: two snapshots → DiffResult."""

from __future__ import annotations

import logging
import time

from configdiff.engine.classifier import classify_changes, classify_groups
from configdiff.engine.matcher import build_rename_index, match_groups, match_properties
from configdiff.engine.reader import MalformedMetadataError, read
from configdiff.metadata import MetadataSnapshot
from configdiff.schema import (
    DiffResult,
    GroupAddition,
    GroupDeletion,
    PropertyAddition,
    PropertyChange,
    PropertyDeletion,
    PropertyDeprecation,
)
from configdiff.sources import SnapshotSource

logger = logging.getLogger(__name__)


def diff(
    older: MetadataSnapshot,
    newer: MetadataSnapshot,
    *,
    left_version: str | None = None,
    right_version: str | None = None,
) -> DiffResult:
    """Compare *older* against *newer*.

    Additions and deletions are the set differences of the property ids.
    Properties present on both sides yield either one deprecation (when only
    the newer side is deprecated) or one change per differing field.

    Returns:
        A :class:`DiffResult` whose lists are sorted by id (``changes`` by
        id, then field name).
    """
    t0 = time.monotonic()

    renames = build_rename_index(older, newer)
    entries = classify_changes(match_properties(older, newer), renames)
    group_entries = classify_groups(match_groups(older, newer))

    result = DiffResult(
        left_version=left_version,
        right_version=right_version,
        additions=sorted(
            (e for e in entries if isinstance(e, PropertyAddition)), key=lambda e: e.id
        ),
        deletions=sorted(
            (e for e in entries if isinstance(e, PropertyDeletion)), key=lambda e: e.id
        ),
        deprecations=sorted(
            (e for e in entries if isinstance(e, PropertyDeprecation)), key=lambda e: e.id
        ),
        changes=sorted(
            (e for e in entries if isinstance(e, PropertyChange)),
            key=lambda e: (e.id, e.field),
        ),
        group_additions=sorted(
            (e for e in group_entries if isinstance(e, GroupAddition)), key=lambda e: e.id
        ),
        group_deletions=sorted(
            (e for e in group_entries if isinstance(e, GroupDeletion)), key=lambda e: e.id
        ),
    )

    elapsed_ms = (time.monotonic() - t0) * 1000
    logger.debug("Diff computed in %.2f ms: %s", elapsed_ms, result.counts())
    return result


def load_snapshot(source: SnapshotSource, version: str, *, encoding: str = "utf-8") -> MetadataSnapshot:
    """Open *version* from *source* and read it, closing the stream afterwards."""
    with source.open(version) as stream:
        try:
            snapshot = read(stream, encoding)
        except MalformedMetadataError as exc:
            raise exc.for_version(version) from exc
    logger.debug("Loaded %s: %d properties", version, len(snapshot.properties))
    return snapshot


def generate_diff(
    source: SnapshotSource,
    left_version: str,
    right_version: str,
    *,
    encoding: str = "utf-8",
) -> DiffResult:
    """Resolve both versions through *source* and diff them.

    Raises:
        SnapshotResolutionError: A version could not be located.
        MalformedMetadataError: A version's metadata is invalid; the error
            carries the offending version.
    """
    older = load_snapshot(source, left_version, encoding=encoding)
    newer = load_snapshot(source, right_version, encoding=encoding)
    return diff(older, newer, left_version=left_version, right_version=right_version)
