"""Catalog store holding the selectable entries of every domain.

A Catalog is built once from loaded entries and never mutated. Reloading
produces a new Catalog that replaces the old one wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .value_objects import (
    WALL_DEPTH_ANY,
    CatalogEntry,
    DimensionKind,
    EntryKind,
    MaterialKind,
    OpeningKind,
)


@dataclass(frozen=True)
class Catalog:
    """Immutable collection of catalog entries in load order.

    Attributes:
        entries: Every entry, in the order the source listed them.
            Duplicate ids are kept here; the resolver de-duplicates.
        source: Description of where the catalog came from.
    """

    entries: tuple[CatalogEntry, ...] = ()
    source: str = ""

    @classmethod
    def empty(cls, source: str = "empty") -> Catalog:
        """Create the degraded catalog used when every source failed."""
        return cls(entries=(), source=source)

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry], source: str = "") -> Catalog:
        return cls(entries=tuple(entries), source=source)

    def get(self, kind: EntryKind) -> list[CatalogEntry]:
        """Return the entries of one kind in load order."""
        return [entry for entry in self.entries if entry.kind == kind]

    @property
    def dimensions(self) -> list[CatalogEntry]:
        """All Height, Width and Length entries."""
        return [entry for entry in self.entries if isinstance(entry.kind, DimensionKind)]

    @property
    def openings(self) -> list[CatalogEntry]:
        return [entry for entry in self.entries if isinstance(entry.kind, OpeningKind)]

    @property
    def materials(self) -> list[CatalogEntry]:
        return [entry for entry in self.entries if isinstance(entry.kind, MaterialKind)]

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def wall_depths(self) -> list[str]:
        """Return the concrete wall-depth classes present, sorted."""
        depths = {
            entry.wall_depth_class
            for entry in self.entries
            if entry.wall_depth_class != WALL_DEPTH_ANY
        }
        return sorted(depths, key=lambda depth: (len(depth), depth))

    def counts(self) -> dict[str, int]:
        """Return the number of entries per kind, keyed by kind value."""
        counts: dict[str, int] = {}
        for kinds in (DimensionKind, OpeningKind, MaterialKind):
            for kind in kinds:
                counts[kind.value] = len(self.get(kind))
        return counts
