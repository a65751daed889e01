"""Manifest store for tracked packages.

This module provides the ManifestStore class, which loads the manifest
from TOML, applies in-memory mutations during a command and persists them
atomically at the end.
"""

import logging
import os
import tomllib
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from packaging.utils import canonicalize_name
from pydantic import ValidationError

from pipctl.models.manifest import Manifest, ManifestEntry

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestParseError(ManifestError):
    """Raised when manifest file cannot be parsed."""


class ManifestValidationError(ManifestError):
    """Raised when manifest content is invalid."""


class ManifestStore:
    """Owns the on-disk record of packages managed by pipctl.

    The store is loaded once per command, mutated in memory and written back
    with :meth:`save`. Writes go to a temporary file in the same directory
    which then replaces the manifest, so an interrupted write never leaves a
    truncated manifest behind. The store is single-writer and not
    thread-safe.

    Attributes:
        path: Location of the manifest file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize ManifestStore.

        Args:
            path: Location of the manifest TOML file.
        """
        self._path = path
        self._manifest: Manifest | None = None
        self._dirty = False

    @property
    def path(self) -> Path:
        """Location of the manifest file."""
        return self._path

    def load(self) -> dict[str, ManifestEntry]:
        """Read the manifest from disk.

        A missing file yields an empty manifest.

        Returns:
            Mapping of normalized package name to ManifestEntry.

        Raises:
            ManifestParseError: If the TOML syntax is invalid.
            ManifestValidationError: If the content doesn't match the schema.
            ManifestError: If the file cannot be read.
        """
        self._manifest = self._read()
        self._dirty = False
        return dict(self._manifest.packages)

    def get(self, name: str) -> ManifestEntry | None:
        """Look up an entry by package name (any spelling)."""
        return self._ensure_loaded().packages.get(canonicalize_name(name))

    def upsert(self, entries: Iterable[ManifestEntry]) -> None:
        """Insert or replace entries, one per normalized name.

        Args:
            entries: Entries to record. A later entry for the same name wins.
        """
        manifest = self._ensure_loaded()
        for entry in entries:
            previous = manifest.packages.get(entry.key)
            manifest.packages[entry.key] = entry
            self._dirty = True
            if previous is None:
                logger.debug("Manifest: added %s %s", entry.name, entry.version)
            else:
                logger.debug(
                    "Manifest: %s %s -> %s", entry.name, previous.version, entry.version
                )

    def remove(self, name: str) -> ManifestEntry | None:
        """Remove an entry by package name.

        Args:
            name: Package name in any spelling.

        Returns:
            The removed entry, or None if the package was not tracked.
        """
        removed = self._ensure_loaded().packages.pop(canonicalize_name(name), None)
        if removed is not None:
            self._dirty = True
            logger.debug("Manifest: removed %s", removed.name)
        return removed

    def list(self) -> list[ManifestEntry]:
        """Return all entries ordered by normalized name."""
        packages = self._ensure_loaded().packages
        return [packages[key] for key in sorted(packages)]

    def save(self) -> bool:
        """Persist pending changes atomically.

        Returns:
            True if the manifest was written, False if there was nothing to save.

        Raises:
            ManifestError: If the file cannot be written. The previous
                manifest is left untouched.
        """
        if not self._dirty:
            logger.debug("Manifest unchanged, skipping write of %s", self._path)
            return False

        manifest = self._ensure_loaded()
        manifest.meta.updated = datetime.now(UTC)
        data = _manifest_to_dict(manifest)

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="wb",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                tomli_w.dump(data, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise ManifestError(f"Failed to write manifest {self._path}: {e}") from e

        self._dirty = False
        logger.info("Saved manifest with %d package(s) to %s", manifest.package_count, self._path)
        return True

    def _ensure_loaded(self) -> Manifest:
        if self._manifest is None:
            self.load()
        assert self._manifest is not None
        return self._manifest

    def _read(self) -> Manifest:
        if not self._path.exists():
            logger.debug("No manifest at %s, starting empty", self._path)
            return Manifest()

        try:
            with open(self._path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ManifestParseError(f"Invalid TOML syntax in {self._path}: {e}") from e
        except OSError as e:
            raise ManifestError(f"Failed to read manifest {self._path}: {e}") from e

        try:
            return Manifest.model_validate(data)
        except ValidationError as e:
            raise ManifestValidationError(f"Invalid manifest content: {e}") from e


def _manifest_to_dict(manifest: Manifest) -> dict[str, Any]:
    """Convert a Manifest to a dictionary suitable for TOML serialization.

    Packages are written in name order so the file diffs cleanly.

    Args:
        manifest: The Manifest object to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return {
        "meta": {
            "version": manifest.meta.version,
            "created": manifest.meta.created.isoformat(),
            "updated": manifest.meta.updated.isoformat(),
        },
        "packages": {
            key: {
                "name": entry.name,
                "version": entry.version,
                "updated": entry.updated.isoformat(),
            }
            for key, entry in sorted(manifest.packages.items())
        },
    }
