"""Manifest models for tracked packages.

This module defines the Pydantic models representing the manifest.toml
structure that records which packages pipctl has installed, and at which
version.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from packaging.utils import canonicalize_name
from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ManifestMeta(BaseModel):
    """Metadata section of the manifest.

    Attributes:
        version: Manifest schema version (e.g., "1.0").
        created: Timestamp when manifest was first created.
        updated: Timestamp when manifest was last modified.
    """

    model_config = ConfigDict(extra="forbid")

    version: Annotated[str, Field(description="Manifest schema version")] = "1.0"
    created: Annotated[
        datetime,
        Field(default_factory=_utcnow, description="Timestamp when manifest was created"),
    ]
    updated: Annotated[
        datetime,
        Field(default_factory=_utcnow, description="Timestamp when manifest was last modified"),
    ]


class ManifestEntry(BaseModel):
    """A package tracked in the manifest.

    Attributes:
        name: Project name as it was installed.
        version: Installed version of the package.
        updated: When this entry was last written.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Annotated[str, Field(min_length=1, description="Project name")]
    version: Annotated[str, Field(min_length=1, description="Installed version")]
    updated: Annotated[
        datetime,
        Field(default_factory=_utcnow, description="Last modification timestamp"),
    ]

    @property
    def key(self) -> str:
        """Normalized project name used as the manifest key."""
        return canonicalize_name(self.name)


class Manifest(BaseModel):
    """Complete manifest of tracked packages.

    Packages are keyed by their normalized project name, so ``Requests``
    and ``requests`` share one entry.

    Attributes:
        meta: Metadata section with version and timestamps.
        packages: Tracked packages keyed by normalized name.
    """

    model_config = ConfigDict(extra="forbid")

    meta: Annotated[ManifestMeta, Field(default_factory=ManifestMeta)]
    packages: Annotated[
        dict[str, ManifestEntry],
        Field(default_factory=dict, description="Tracked packages"),
    ]

    @model_validator(mode="before")
    @classmethod
    def fill_entry_names(cls, data: object) -> object:
        """Default each entry's name to its table key."""
        if isinstance(data, dict) and isinstance(data.get("packages"), dict):
            packages = {}
            for key, entry in data["packages"].items():
                if isinstance(entry, dict) and "name" not in entry:
                    entry = {"name": key, **entry}
                packages[key] = entry
            data = {**data, "packages": packages}
        return data

    @model_validator(mode="after")
    def validate_unique_names(self) -> Manifest:
        """Re-key entries by normalized name, rejecting duplicates."""
        normalized: dict[str, ManifestEntry] = {}
        for entry in self.packages.values():
            if entry.key in normalized:
                msg = f"Package listed more than once: {entry.name}"
                raise ValueError(msg)
            normalized[entry.key] = entry
        self.packages = normalized
        return self

    @property
    def package_count(self) -> int:
        """Total number of packages tracked in the manifest."""
        return len(self.packages)
