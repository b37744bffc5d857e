"""Tests for spaces configuration parsing and environment settings."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from contentful_search.application.config import load_settings, load_spaces_config, parse_space_configs
from contentful_search.domain.entities import SpaceDescriptor
from contentful_search.shared.exceptions import (
    EmptyConfigError,
    InvalidSpaceEntryError,
    MalformedConfigError,
)

# ============================================================
# parse_space_configs
# ============================================================


class TestParseSpaceConfigs:
    def test_valid_configuration(self, spaces_json):
        spaces = parse_space_configs(spaces_json)
        assert spaces == [
            SpaceDescriptor(name="Marketing", space_id="space-a", access_token="token-a"),
            SpaceDescriptor(name="Docs", space_id="space-b", access_token="token-b", environment="staging"),
        ]

    def test_environment_defaults_to_master(self):
        spaces = parse_space_configs('[{"name": "Blog", "spaceId": "abc", "accessToken": "t"}]')
        assert spaces[0].environment == "master"

    def test_non_string_environment_defaults_to_master(self):
        spaces = parse_space_configs('[{"name": "Blog", "spaceId": "abc", "accessToken": "t", "environment": 5}]')
        assert spaces[0].environment == "master"

    def test_extra_fields_ignored(self):
        spaces = parse_space_configs('[{"name": "B", "spaceId": "s", "accessToken": "t", "color": "red"}]')
        assert len(spaces) == 1

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
    def test_blank_input(self, raw):
        with pytest.raises(EmptyConfigError):
            parse_space_configs(raw)

    def test_empty_array(self):
        with pytest.raises(EmptyConfigError, match="At least one space"):
            parse_space_configs("[]")

    def test_invalid_json(self):
        with pytest.raises(MalformedConfigError, match="Invalid JSON"):
            parse_space_configs("[{not json")

    @pytest.mark.parametrize("raw", ['{"name": "x"}', '"spaces"', "42"])
    def test_not_an_array(self, raw):
        with pytest.raises(MalformedConfigError, match="must be a JSON array"):
            parse_space_configs(raw)

    def test_element_not_an_object(self):
        raw = json.dumps([{"name": "A", "spaceId": "a", "accessToken": "t"}, "oops"])
        with pytest.raises(InvalidSpaceEntryError) as exc_info:
            parse_space_configs(raw)
        assert exc_info.value.index == 1
        assert exc_info.value.field_name is None

    @pytest.mark.parametrize("field_name", ["name", "spaceId", "accessToken"])
    def test_missing_required_field(self, field_name):
        config = {"name": "A", "spaceId": "a", "accessToken": "t"}
        del config[field_name]
        with pytest.raises(InvalidSpaceEntryError) as exc_info:
            parse_space_configs(json.dumps([config]))
        assert exc_info.value.index == 0
        assert exc_info.value.field_name == field_name

    def test_empty_string_field_is_missing(self):
        raw = json.dumps([{"name": "", "spaceId": "a", "accessToken": "t"}])
        with pytest.raises(InvalidSpaceEntryError, match="name"):
            parse_space_configs(raw)

    def test_non_string_field_is_missing(self):
        raw = json.dumps([{"name": "A", "spaceId": 123, "accessToken": "t"}])
        with pytest.raises(InvalidSpaceEntryError, match="spaceId"):
            parse_space_configs(raw)

    def test_first_missing_field_reported(self):
        raw = json.dumps([{"accessToken": "t"}])
        with pytest.raises(InvalidSpaceEntryError) as exc_info:
            parse_space_configs(raw)
        assert exc_info.value.field_name == "name"

    def test_order_preserved(self):
        raw = json.dumps([{"name": n, "spaceId": n.lower(), "accessToken": "t"} for n in ["C", "A", "B"]])
        assert [s.name for s in parse_space_configs(raw)] == ["C", "A", "B"]

    def test_duplicates_kept(self):
        raw = json.dumps([{"name": "A", "spaceId": "a", "accessToken": "t"}] * 2)
        assert len(parse_space_configs(raw)) == 2

    def test_access_token_not_in_repr(self):
        space = parse_space_configs('[{"name": "Blog", "spaceId": "abc", "accessToken": "secret"}]')[0]
        assert "secret" not in repr(space)


# ============================================================
# Settings
# ============================================================


class TestLoadSpacesConfig:
    def test_from_environment(self, spaces_json):
        with patch.dict("os.environ", {"CONTENTFUL_SPACES": spaces_json}, clear=True):
            assert load_spaces_config() == spaces_json

    def test_environment_wins_over_file(self, tmp_path, spaces_json):
        path = tmp_path / "spaces.json"
        path.write_text("[]", encoding="utf-8")
        env = {"CONTENTFUL_SPACES": spaces_json, "CONTENTFUL_SPACES_FILE": str(path)}
        with patch.dict("os.environ", env, clear=True):
            assert load_spaces_config() == spaces_json

    def test_from_file(self, tmp_path, spaces_json):
        path = tmp_path / "spaces.json"
        path.write_text(spaces_json, encoding="utf-8")
        with patch.dict("os.environ", {"CONTENTFUL_SPACES_FILE": str(path)}, clear=True):
            assert load_spaces_config() == spaces_json

    def test_unreadable_file(self, tmp_path):
        with patch.dict("os.environ", {"CONTENTFUL_SPACES_FILE": str(tmp_path / "missing.json")}, clear=True):
            assert load_spaces_config() == ""

    def test_unset(self):
        with patch.dict("os.environ", {}, clear=True):
            assert load_spaces_config() == ""


class TestLoadSettings:
    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = load_settings()
        assert settings == {
            "api_host": "cdn.contentful.com",
            "web_app_host": "contentful.com",
            "timeout": 30.0,
            "debounce_ms": 300,
            "latest_limit": 10,
        }

    def test_overrides(self):
        env = {
            "CONTENTFUL_API_HOST": "preview.contentful.com",
            "CONTENTFUL_TIMEOUT": "5",
            "CONTENTFUL_DEBOUNCE_MS": "150",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = load_settings()
        assert settings["api_host"] == "preview.contentful.com"
        assert settings["timeout"] == 5.0
        assert settings["debounce_ms"] == 150.0

    def test_invalid_number_falls_back(self):
        with patch.dict("os.environ", {"CONTENTFUL_TIMEOUT": "soon"}, clear=True):
            assert load_settings()["timeout"] == 30.0
