"""
POS Core Config — Access Configuration
========================================
The static configuration surface of the access guard: location
directory, route pattern sets, fallback paths and role aliases.

Doctrine: no location keys or route literals in guard logic.
They come from here, and here they come from defaults, a mapping
(Django settings) or a JSON file.

Configuration errors are fatal at construction. They never become
runtime Deny decisions.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from core.config import defaults
from core.identity.roles import RoleKind, normalize_role_alias, parse_role_kind
from core.locations.directory import Location, LocationDirectory
from core.locations.errors import LocationError
from core.routing.patterns import (
    InvalidPatternError,
    LocationPattern,
    RoutePatterns,
)


class ConfigurationError(Exception):
    """Access configuration is invalid. The guard must not be built."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid access configuration: {detail}")


# ══════════════════════════════════════════════════════════════
# ACCESS CONFIG
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AccessConfig:
    """
    Everything the guard needs besides the request itself.

    Fields:
        directory:             LocationDirectory (key ↔ id).
        route_patterns:        RoutePatterns for the classifier.
        default_location_key:  Used when an identity's location cannot be
                               reversed to a key.
        top_level_fallback:    Redirect target when there is no usable identity.
        operator_home:         Operator landing template.
        manager_home:          Manager landing template.
        public_paths:          Reachable without a session ("/" = root only).
        role_aliases:          Session role string → RoleKind.
    """

    directory: LocationDirectory
    route_patterns: RoutePatterns
    default_location_key: str = defaults.DEFAULT_LOCATION_KEY
    top_level_fallback: str = defaults.TOP_LEVEL_FALLBACK
    operator_home: LocationPattern = field(
        default_factory=lambda: LocationPattern(defaults.OPERATOR_HOME_TEMPLATE)
    )
    manager_home: LocationPattern = field(
        default_factory=lambda: LocationPattern(defaults.MANAGER_HOME_TEMPLATE)
    )
    public_paths: Tuple[str, ...] = defaults.PUBLIC_PATHS
    role_aliases: Mapping[str, RoleKind] = field(
        default_factory=lambda: dict(defaults.ROLE_ALIASES)
    )

    def __post_init__(self):
        if not isinstance(self.directory, LocationDirectory):
            raise ConfigurationError("directory must be LocationDirectory.")
        if len(self.directory) == 0:
            raise ConfigurationError("location directory is empty.")
        if not isinstance(self.route_patterns, RoutePatterns):
            raise ConfigurationError("route_patterns must be RoutePatterns.")
        if not self.directory.has_key(self.default_location_key):
            raise ConfigurationError(
                f"default_location_key '{self.default_location_key}' "
                f"is not in the location directory."
            )
        if (
            not isinstance(self.top_level_fallback, str)
            or not self.top_level_fallback.startswith("/")
        ):
            raise ConfigurationError("top_level_fallback must be an absolute path.")
        if not isinstance(self.public_paths, tuple) or not all(
            isinstance(p, str) and p.startswith("/") for p in self.public_paths
        ):
            raise ConfigurationError("public_paths must be a tuple of absolute paths.")
        for alias, role in self.role_aliases.items():
            if not isinstance(role, RoleKind):
                raise ConfigurationError(f"role alias '{alias}' must map to RoleKind.")
        normalized = {normalize_role_alias(a): r for a, r in self.role_aliases.items()}
        object.__setattr__(self, "role_aliases", normalized)

    # ── Constructors ──────────────────────────────────────────

    @classmethod
    def default(cls) -> "AccessConfig":
        return cls.from_mapping({})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AccessConfig":
        """
        Build from a plain mapping; absent keys take the shipped defaults.

        Recognised keys:
            locations                  {key: id} or [{"key", "id", "name"}]
            default_location_key       str
            top_level_fallback         str
            operator_home              template with {location}
            manager_home               template with {location}
            forbidden_prefixes         [str]
            scoped_dashboard_patterns  [template]
            location_scoped_patterns   [template]
            restricted_sections        [str]
            allowed_prefixes           [str]
            role_restricted            {prefix: [role kind]}
            public_paths               [str]
            role_aliases               {session role: role kind}
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("access configuration must be a mapping.")

        try:
            directory = _build_directory(data.get("locations"))
            route_patterns = RoutePatterns(
                forbidden_prefixes=_str_tuple(
                    data, "forbidden_prefixes", defaults.FORBIDDEN_PREFIXES
                ),
                scoped_dashboard=_pattern_tuple(
                    data, "scoped_dashboard_patterns", defaults.SCOPED_DASHBOARD_PATTERNS
                ),
                location_scoped=_pattern_tuple(
                    data, "location_scoped_patterns", defaults.LOCATION_SCOPED_PATTERNS
                ),
                restricted_sections=_str_tuple(
                    data, "restricted_sections", defaults.RESTRICTED_SECTIONS
                ),
                allowed_prefixes=_str_tuple(
                    data, "allowed_prefixes", defaults.ALLOWED_PREFIXES
                ),
                role_restricted=_role_restricted(data.get("role_restricted")),
            )
            return cls(
                directory=directory,
                route_patterns=route_patterns,
                default_location_key=data.get(
                    "default_location_key", defaults.DEFAULT_LOCATION_KEY
                ),
                top_level_fallback=data.get(
                    "top_level_fallback", defaults.TOP_LEVEL_FALLBACK
                ),
                operator_home=LocationPattern(
                    data.get("operator_home", defaults.OPERATOR_HOME_TEMPLATE)
                ),
                manager_home=LocationPattern(
                    data.get("manager_home", defaults.MANAGER_HOME_TEMPLATE)
                ),
                public_paths=_str_tuple(data, "public_paths", defaults.PUBLIC_PATHS),
                role_aliases=_role_aliases(data.get("role_aliases")),
            )
        except (LocationError, InvalidPatternError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_json_file(cls, path) -> "AccessConfig":
        """Load from JSON. Repeated object keys are rejected, not merged."""
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"cannot read {file_path}: {exc}") from exc
        try:
            data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{file_path} is not valid JSON: {exc}") from exc
        return cls.from_mapping(data)


# ══════════════════════════════════════════════════════════════
# PARSING HELPERS
# ══════════════════════════════════════════════════════════════

def _reject_duplicate_keys(pairs) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ConfigurationError(f"duplicate key {key!r} in JSON object.")
        result[key] = value
    return result


def _build_directory(raw) -> LocationDirectory:
    if raw is None:
        return LocationDirectory(
            Location(key=key, id=location_id, display_name=name)
            for key, location_id, name in defaults.DEFAULT_LOCATIONS
        )
    if isinstance(raw, Mapping):
        return LocationDirectory.from_mapping(raw)
    if isinstance(raw, (list, tuple)):
        entries = []
        for item in raw:
            if not isinstance(item, Mapping) or "key" not in item or "id" not in item:
                raise ConfigurationError(
                    "location entries must be objects with 'key' and 'id'."
                )
            entries.append(
                Location(
                    key=item["key"],
                    id=item["id"],
                    display_name=item.get("name", ""),
                )
            )
        return LocationDirectory(entries)
    raise ConfigurationError("locations must be a mapping or a list.")


def _str_tuple(data: Mapping[str, Any], key: str, default) -> Tuple[str, ...]:
    value = data.get(key, default)
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{key} must be a list of strings.")
    if not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"{key} must be a list of strings.")
    return tuple(value)


def _pattern_tuple(data: Mapping[str, Any], key: str, default) -> Tuple[LocationPattern, ...]:
    return tuple(LocationPattern(t) for t in _str_tuple(data, key, default))


def _role_restricted(raw) -> Tuple[Tuple[str, frozenset], ...]:
    if raw is None:
        return tuple(
            (prefix, frozenset(roles)) for prefix, roles in defaults.ROLE_RESTRICTED
        )
    if not isinstance(raw, Mapping):
        raise ConfigurationError("role_restricted must be a mapping of prefix → roles.")
    entries = []
    for prefix, roles in raw.items():
        if isinstance(roles, str) or not isinstance(roles, (list, tuple)):
            raise ConfigurationError(f"role_restricted[{prefix!r}] must be a list.")
        entries.append((prefix, frozenset(parse_role_kind(r) for r in roles)))
    return tuple(entries)


def _role_aliases(raw) -> Dict[str, RoleKind]:
    if raw is None:
        return dict(defaults.ROLE_ALIASES)
    if not isinstance(raw, Mapping):
        raise ConfigurationError("role_aliases must be a mapping.")
    return {alias: parse_role_kind(role) for alias, role in raw.items()}
