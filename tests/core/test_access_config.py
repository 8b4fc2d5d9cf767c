"""
Tests — Access Configuration
==============================
Defaults, mapping overrides, JSON loading, fatal validation.
"""

from __future__ import annotations

import json

import pytest

from core.config import AccessConfig, ConfigurationError
from core.identity import RoleKind
from core.routing import RouteClass, RouteClassifier


class TestDefaults:
    def test_default_directory(self):
        config = AccessConfig.default()
        assert config.directory.key_to_id("al-ouloum") == 1
        assert config.directory.key_to_id("renaissance") == 2
        assert config.directory.key_to_id("gros") == 3
        assert config.directory.display_name(2) == "Librairie La Renaissance"

    def test_default_fallbacks(self):
        config = AccessConfig.default()
        assert config.default_location_key == "al-ouloum"
        assert config.top_level_fallback == "/"
        assert config.operator_home.render("gros") == "/dashboard/stock/gros/cashier"
        assert config.manager_home.render("gros") == "/dashboard/stock/gros"

    def test_default_role_aliases(self):
        aliases = AccessConfig.default().role_aliases
        assert aliases["caissier"] is RoleKind.OPERATOR
        assert aliases["admin"] is RoleKind.MANAGER
        assert aliases["super_admin"] is RoleKind.GLOBAL_ADMIN


class TestFromMapping:
    def test_locations_as_list_with_names(self):
        config = AccessConfig.from_mapping(
            {
                "locations": [
                    {"key": "centre", "id": 10, "name": "Centre Ville"},
                    {"key": "port", "id": 11},
                ],
                "default_location_key": "centre",
            }
        )
        assert config.directory.id_to_key(11) == "port"
        assert config.directory.display_name(10) == "Centre Ville"

    def test_patterns_swappable_without_code_changes(self):
        config = AccessConfig.from_mapping(
            {
                "scoped_dashboard_patterns": ["/pos/{location}/till"],
                "location_scoped_patterns": ["/pos/{location}"],
                "forbidden_prefixes": ["/backoffice/"],
                "restricted_sections": ["/pos/"],
                "allowed_prefixes": ["/", "/help"],
                "operator_home": "/pos/{location}/till",
                "manager_home": "/pos/{location}",
            }
        )
        classifier = RouteClassifier(config.route_patterns)
        descriptor = classifier.classify("/pos/gros/till/scan")
        assert descriptor.route_class is RouteClass.SCOPED_DASHBOARD
        assert descriptor.requested_location_key == "gros"
        assert classifier.classify("/backoffice/x").route_class is RouteClass.FORBIDDEN
        assert classifier.classify("/products/42").route_class is RouteClass.UNCLASSIFIED

    def test_role_restricted_and_aliases(self):
        config = AccessConfig.from_mapping(
            {
                "role_restricted": {"/finance/": ["manager", "GLOBAL_ADMIN"]},
                "role_aliases": {"Vendeur": "operator"},
            }
        )
        assert config.route_patterns.role_restricted == (
            ("/finance/", frozenset({RoleKind.MANAGER, RoleKind.GLOBAL_ADMIN})),
        )
        assert config.role_aliases == {"vendeur": RoleKind.OPERATOR}


class TestValidation:
    def test_duplicate_location_ids_are_fatal(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"locations": {"a": 1, "b": 1}, "default_location_key": "a"})

    def test_duplicate_location_keys_in_list_are_fatal(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping(
                {
                    "locations": [{"key": "a", "id": 1}, {"key": "a", "id": 2}],
                    "default_location_key": "a",
                }
            )

    def test_default_key_must_exist(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"default_location_key": "nowhere"})

    def test_empty_directory_rejected(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"locations": {}})

    def test_bad_pattern_rejected(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"scoped_dashboard_patterns": ["/no-placeholder"]})

    def test_prefix_must_be_list(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"forbidden_prefixes": "/admin/"})

    def test_unknown_role_kind_rejected(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"role_aliases": {"x": "janitor"}})

    def test_relative_fallback_rejected(self):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_mapping({"top_level_fallback": "login"})


class TestFromJsonFile:
    def test_loads_file(self, tmp_path):
        path = tmp_path / "access.json"
        path.write_text(
            json.dumps({"locations": {"al-ouloum": 1, "renaissance": 2}}),
            encoding="utf-8",
        )
        config = AccessConfig.from_json_file(path)
        assert config.directory.keys() == ("al-ouloum", "renaissance")

    def test_duplicate_json_keys_rejected(self, tmp_path):
        path = tmp_path / "access.json"
        path.write_text(
            '{"locations": {"al-ouloum": 1, "al-ouloum": 2}}',
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError):
            AccessConfig.from_json_file(path)

    def test_invalid_json_rejected(self, tmp_path):
        path = tmp_path / "access.json"
        path.write_text("{locations", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            AccessConfig.from_json_file(path)

    def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            AccessConfig.from_json_file(tmp_path / "absent.json")
