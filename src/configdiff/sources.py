"""Snapshot sources: locate the metadata document of a release.

All filesystem and archive access lives here. Nothing else touches files.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, NoReturn, Protocol

logger = logging.getLogger(__name__)

DEFAULT_METADATA_ENTRY = "META-INF/spring-configuration-metadata.json"

ARCHIVE_SUFFIXES: tuple[str, ...] = (".jar", ".zip")


class SnapshotResolutionError(RuntimeError):
    """The metadata document of a release could not be located."""

    def __init__(self, version: str, message: str) -> None:
        super().__init__(f"{version}: {message}")
        self.version = version
        self.reason = message


class SnapshotSource(Protocol):
    """Supplies the raw metadata document of a release.

    The caller owns the returned stream and must close it.
    """

    def open(self, version: str) -> BinaryIO: ...


class FileSnapshotSource:
    """Treats each version as a path on disk.

    The path may name the metadata JSON itself, a ``.jar``/``.zip`` archive
    holding *entry*, or a directory holding *entry*.
    """

    def __init__(self, entry: str = DEFAULT_METADATA_ENTRY, base_dir: str | Path = ".") -> None:
        self.entry = entry
        self.base_dir = Path(base_dir)

    def open(self, version: str) -> BinaryIO:
        path = self.base_dir / version
        logger.debug("Resolving %s from %s", version, path)

        if path.is_dir():
            candidate = path / self.entry
            if not candidate.is_file():
                self._fail(version, f"No {self.entry} in directory {path}")
            return candidate.open("rb")

        if not path.is_file():
            self._fail(version, f"No such file: {path}")

        if path.suffix.lower() in ARCHIVE_SUFFIXES:
            return self._open_archive(version, path)

        return path.open("rb")

    def _open_archive(self, version: str, path: Path) -> BinaryIO:
        try:
            with zipfile.ZipFile(path) as archive:
                try:
                    data = archive.read(self.entry)
                except KeyError:
                    self._fail(version, f"No {self.entry} in archive {path}")
        except zipfile.BadZipFile as exc:
            msg = f"Not a valid archive: {path}"
            logger.error("%s: %s", version, msg)
            raise SnapshotResolutionError(version, msg) from exc
        return io.BytesIO(data)

    @staticmethod
    def _fail(version: str, msg: str) -> NoReturn:
        logger.error("%s: %s", version, msg)
        raise SnapshotResolutionError(version, msg)


class TemplateSnapshotSource:
    """Maps a version label onto a path template, e.g. ``dist/{version}/app.jar``."""

    def __init__(self, template: str, delegate: FileSnapshotSource | None = None) -> None:
        if "{version}" not in template:
            msg = f"Template must contain '{{version}}': {template}"
            raise ValueError(msg)
        self.template = template
        self.delegate = delegate or FileSnapshotSource()

    def open(self, version: str) -> BinaryIO:
        path = self.template.format(version=version)
        try:
            return self.delegate.open(path)
        except SnapshotResolutionError as exc:
            raise SnapshotResolutionError(version, exc.reason) from exc
