"""
POS Locations — Errors
========================
"""

from __future__ import annotations


class LocationError(Exception):
    """Base error for location directory operations."""
    pass


class UnknownLocation(LocationError):
    """Lookup for a key or id that is not in the directory."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown location {value!r}.")


class DuplicateLocationError(LocationError):
    """
    Directory construction found a repeated key or id.

    Fatal configuration error: the mapping must be injective so that
    reverse lookup is deterministic.
    """

    def __init__(self, field_name: str, value):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Duplicate location {field_name} {value!r} in directory."
        )
