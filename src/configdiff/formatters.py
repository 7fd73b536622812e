"""Diff formatting: renders a DiffResult as text.

Every formatter emits the categories in the same order (additions, deletions,
deprecations, changes, then group additions and deletions) and each entry
exactly once, in list order. Empty categories are left out.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from configdiff.metadata import Deprecation, MetadataProperty, extract_short_description
from configdiff.schema import (
    DiffResult,
    PropertyAddition,
    PropertyChange,
    PropertyDeletion,
    PropertyDeprecation,
)

NO_CHANGES = "No configuration changes."

_FIELD_LABELS: dict[str, str] = {
    "type": "type",
    "description": "description",
    "default_value": "default value",
    "deprecation": "deprecation",
}


class DiffFormatter(ABC):
    """Renders a :class:`DiffResult` in one output dialect."""

    name: str = ""

    @abstractmethod
    def format_diff(self, result: DiffResult) -> str:
        """Render *result*."""


def _title(result: DiffResult) -> str:
    if result.left_version and result.right_version:
        return f"Configuration changes {result.left_version} → {result.right_version}"
    return "Configuration changes"


def render_value(value: Any) -> str:
    """Human-readable rendering of a property field value."""
    if value is None:
        return "(none)"
    if isinstance(value, Deprecation):
        return _deprecation_label(value)
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def _deprecation_label(dep: Deprecation) -> str:
    parts = [f"level {dep.level}"]
    if dep.replacement:
        parts.append(f"replacement {dep.replacement}")
    if dep.reason:
        parts.append(f"reason: {extract_short_description(dep.reason)}")
    return ", ".join(parts)


def _describe(prop: MetadataProperty) -> str:
    return extract_short_description(prop.description) or ""


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


class TextDiffFormatter(DiffFormatter):
    """Indented plain text, one line per entry."""

    name = "text"

    def format_diff(self, result: DiffResult) -> str:
        if result.is_empty:
            return NO_CHANGES

        lines: list[str] = [_title(result)]
        sections: list[tuple[str, list[str]]] = [
            ("Added properties", [self._addition(e) for e in result.additions]),
            ("Removed properties", [self._deletion(e) for e in result.deletions]),
            ("Deprecated properties", [self._deprecation(e) for e in result.deprecations]),
            ("Changed properties", [self._change(e) for e in result.changes]),
            ("Added groups", [f"  + {e.id}" for e in result.group_additions]),
            ("Removed groups", [f"  - {e.id}" for e in result.group_deletions]),
        ]
        for heading, entries in sections:
            if not entries:
                continue
            lines.append("")
            lines.append(f"{heading} ({len(entries)})")
            lines.extend(entries)
        return "\n".join(lines)

    @staticmethod
    def _addition(e: PropertyAddition) -> str:
        line = f"  + {e.id} ({e.new.type})"
        if e.new.default_value is not None:
            line += f" default {render_value(e.new.default_value)}"
        desc = _describe(e.new)
        return f"{line}: {desc}" if desc else line

    @staticmethod
    def _deletion(e: PropertyDeletion) -> str:
        line = f"  - {e.id}"
        if e.replacement:
            line += f" (replaced by {e.replacement})"
        return line

    @staticmethod
    def _deprecation(e: PropertyDeprecation) -> str:
        assert e.new.deprecation is not None
        return f"  ! {e.id} ({_deprecation_label(e.new.deprecation)})"

    @staticmethod
    def _change(e: PropertyChange) -> str:
        label = _FIELD_LABELS[e.field]
        return f"  ~ {e.id} {label}: {render_value(e.old_value)} → {render_value(e.new_value)}"


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def _cell(text: str | None) -> str:
    if not text:
        return ""
    return " ".join(text.split()).replace("|", "\\|")


def _table(headers: list[str], rows: list[list[str]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(c) for c in row) + " |")
    return lines


class MarkdownDiffFormatter(DiffFormatter):
    """One Markdown table per category."""

    name = "markdown"

    def format_diff(self, result: DiffResult) -> str:
        if result.is_empty:
            return NO_CHANGES

        lines: list[str] = [f"# {_title(result)}"]

        if result.additions:
            rows = [
                [
                    f"`{e.id}`",
                    e.new.type,
                    "" if e.new.default_value is None else render_value(e.new.default_value),
                    _describe(e.new),
                ]
                for e in result.additions
            ]
            self._section(lines, "Added properties", ["Key", "Type", "Default", "Description"], rows)

        if result.deletions:
            rows = [[f"`{e.id}`", e.replacement or ""] for e in result.deletions]
            self._section(lines, "Removed properties", ["Key", "Replacement"], rows)

        if result.deprecations:
            rows = []
            for e in result.deprecations:
                assert e.new.deprecation is not None
                dep = e.new.deprecation
                rows.append(
                    [
                        f"`{e.id}`",
                        dep.replacement or "",
                        dep.level,
                        extract_short_description(dep.reason) or "",
                    ]
                )
            self._section(
                lines, "Deprecated properties", ["Key", "Replacement", "Level", "Reason"], rows
            )

        if result.changes:
            rows = [
                [
                    f"`{e.id}`",
                    _FIELD_LABELS[e.field],
                    render_value(e.old_value),
                    render_value(e.new_value),
                ]
                for e in result.changes
            ]
            self._section(lines, "Changed properties", ["Key", "Field", "Old", "New"], rows)

        if result.group_additions:
            rows = [
                [f"`{e.id}`", e.new.type or "", e.new.short_description or ""]
                for e in result.group_additions
            ]
            self._section(lines, "Added groups", ["Group", "Type", "Description"], rows)

        if result.group_deletions:
            rows = [[f"`{e.id}`", e.old.type or ""] for e in result.group_deletions]
            self._section(lines, "Removed groups", ["Group", "Type"], rows)

        return "\n".join(lines)

    @staticmethod
    def _section(lines: list[str], heading: str, headers: list[str], rows: list[list[str]]) -> None:
        lines.append("")
        lines.append(f"## {heading}")
        lines.append("")
        lines.extend(_table(headers, rows))


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class JsonDiffFormatter(DiffFormatter):
    """The DiffResult schema itself, as indented JSON."""

    name = "json"

    def format_diff(self, result: DiffResult) -> str:
        return result.model_dump_json(indent=2)


_FORMATTERS: dict[str, type[DiffFormatter]] = {
    cls.name: cls for cls in (TextDiffFormatter, MarkdownDiffFormatter, JsonDiffFormatter)
}

FORMAT_NAMES: tuple[str, ...] = tuple(_FORMATTERS)


def get_formatter(name: str) -> DiffFormatter:
    """Return a formatter instance by dialect name."""
    cls = _FORMATTERS.get(name)
    if cls is None:
        msg = f"Unknown format: {name}"
        raise ValueError(msg)
    return cls()
