"""
POS Locations — Location Directory
====================================
Static bidirectional mapping between human-readable location keys
("renaissance") and internal numeric location ids (2).

Rules:
- Closed set, read-only after construction
- Unique in both directions (duplicates rejected at construction)
- Unknown lookups raise UnknownLocation, never default silently
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from core.locations.errors import DuplicateLocationError, UnknownLocation

_KEY_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


# ══════════════════════════════════════════════════════════════
# LOCATION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Location:
    """One physical stock/store entity."""

    key: str
    id: int
    display_name: str = ""

    def __post_init__(self):
        if not isinstance(self.key, str) or not _KEY_PATTERN.match(self.key):
            raise ValueError(
                f"Location key {self.key!r} must be a lowercase URL segment."
            )
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise ValueError(
                f"Location id for '{self.key}' must be a positive integer."
            )
        if not isinstance(self.display_name, str):
            raise ValueError("display_name must be a string.")


# ══════════════════════════════════════════════════════════════
# DIRECTORY
# ══════════════════════════════════════════════════════════════

class LocationDirectory:
    """
    Immutable key ↔ id directory.

    Usage:
        directory = LocationDirectory.from_mapping(
            {"al-ouloum": 1, "renaissance": 2, "gros": 3}
        )
        directory.key_to_id("renaissance")  # 2
        directory.id_to_key(3)              # "gros"
    """

    def __init__(self, locations: Iterable[Location]):
        by_key: Dict[str, Location] = {}
        by_id: Dict[int, Location] = {}
        for location in locations:
            if not isinstance(location, Location):
                raise ValueError("LocationDirectory entries must be Location.")
            if location.key in by_key:
                raise DuplicateLocationError("key", location.key)
            if location.id in by_id:
                raise DuplicateLocationError("id", location.id)
            by_key[location.key] = location
            by_id[location.id] = location
        self._by_key = by_key
        self._by_id = by_id

    @classmethod
    def from_mapping(
        cls,
        key_to_id: Mapping[str, int],
        display_names: Mapping[int, str] | None = None,
    ) -> "LocationDirectory":
        names = dict(display_names or {})
        return cls(
            Location(key=key, id=location_id, display_name=names.get(location_id, ""))
            for key, location_id in key_to_id.items()
        )

    # ── Lookups ───────────────────────────────────────────────

    def key_to_id(self, key: str) -> int:
        location = self._by_key.get(key) if isinstance(key, str) else None
        if location is None:
            raise UnknownLocation(key)
        return location.id

    def id_to_key(self, location_id: int) -> str:
        location = self._lookup_id(location_id)
        return location.key

    def display_name(self, location_id: int) -> str:
        """Human label for a location; falls back to the key when unnamed."""
        location = self._lookup_id(location_id)
        return location.display_name or location.key

    def get(self, key: str) -> Location:
        location = self._by_key.get(key) if isinstance(key, str) else None
        if location is None:
            raise UnknownLocation(key)
        return location

    def _lookup_id(self, location_id: int) -> Location:
        if isinstance(location_id, bool):
            raise UnknownLocation(location_id)
        try:
            location = self._by_id.get(location_id)
        except TypeError:
            location = None
        if location is None:
            raise UnknownLocation(location_id)
        return location

    # ── Introspection ─────────────────────────────────────────

    def keys(self) -> Tuple[str, ...]:
        return tuple(sorted(self._by_key))

    def ids(self) -> Tuple[int, ...]:
        return tuple(sorted(self._by_id))

    def has_key(self, key: str) -> bool:
        return isinstance(key, str) and key in self._by_key

    def __contains__(self, location_id) -> bool:
        if isinstance(location_id, bool) or not isinstance(location_id, int):
            return False
        return location_id in self._by_id

    def __iter__(self) -> Iterator[Location]:
        return iter(sorted(self._by_id.values(), key=lambda loc: loc.id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __repr__(self) -> str:
        entries = ", ".join(f"{loc.key}={loc.id}" for loc in self)
        return f"LocationDirectory({entries})"
