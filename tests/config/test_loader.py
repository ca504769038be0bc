"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: kwargs > env > .mockwright.yaml > defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from mockwright.config.loader import CONFIG_FILENAME, _deep_merge, _load_yaml, load_config
from mockwright.config.models import MockwrightConfig
from mockwright.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def _clean_env() -> Any:
    """Strip MOCKWRIGHT__ variables from the environment for each test."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("MOCKWRIGHT__")}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("generate:\n  package_name: fakes\n")

        assert _load_yaml(yaml_file) == {"generate": {"package_name": "fakes"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("generate:\n  note:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"generate": {"in_package": False, "note": "x"}}
        override = {"generate": {"in_package": True}}

        assert _deep_merge(base, override) == {"generate": {"in_package": True, "note": "x"}}

    def test_does_not_mutate_base(self) -> None:
        """Base dict is left untouched."""
        base: dict[str, Any] = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults_without_any_source(self, tmp_path: Path) -> None:
        """No file, env or kwargs yields built-in defaults."""
        config = load_config(tmp_path)

        assert isinstance(config, MockwrightConfig)
        assert config.logging.level == "WARNING"
        assert config.generate.output_dir == "./mocks"
        assert config.generate.package_name == "mocks"
        assert config.generate.case == "camel"
        assert config.registration.enabled is True
        assert config.registration.output_path == "./mocks/register.go"
        assert config.registration.module_root is None

    def test_yaml_file_is_applied(self, tmp_path: Path) -> None:
        """Values from .mockwright.yaml override defaults."""
        (tmp_path / CONFIG_FILENAME).write_text(
            "generate:\n  package_name: fakes\nregistration:\n  module_root: /work/src\n"
        )

        config = load_config(tmp_path)

        assert config.generate.package_name == "fakes"
        assert config.registration.module_root == "/work/src"

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        """Environment variables beat the YAML file."""
        (tmp_path / CONFIG_FILENAME).write_text("logging:\n  level: INFO\n")

        with patch.dict(os.environ, {"MOCKWRIGHT__LOGGING__LEVEL": "ERROR"}):
            config = load_config(tmp_path)

        assert config.logging.level == "ERROR"

    def test_registration_section_from_env(self, tmp_path: Path) -> None:
        """The registration section reads MOCKWRIGHT__REGISTRATION__* variables."""
        with patch.dict(os.environ, {"MOCKWRIGHT__REGISTRATION__ENABLED": "false"}):
            config = load_config(tmp_path)

        assert config.registration.enabled is False

    def test_kwargs_override_everything(self, tmp_path: Path) -> None:
        """Keyword overrides win over env and YAML."""
        (tmp_path / CONFIG_FILENAME).write_text("generate:\n  package_name: fromfile\n")

        with patch.dict(os.environ, {"MOCKWRIGHT__GENERATE__PACKAGE_NAME": "fromenv"}):
            config = load_config(tmp_path, generate={"package_name": "fromcli"})

        assert config.generate.package_name == "fromcli"

    def test_partial_kwargs_keep_other_fields(self, tmp_path: Path) -> None:
        """A partial section override keeps sibling values."""
        (tmp_path / CONFIG_FILENAME).write_text("generate:\n  note: from file\n")

        config = load_config(tmp_path, generate={"in_package": True})

        assert config.generate.in_package is True
        assert config.generate.note == "from file"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        """Validation failures surface as ConfigError.invalid_value."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, generate={"package_name": "not-a-name"})

        assert exc_info.value.code is ErrorCode.CONFIG_INVALID_VALUE
        assert "package_name" in exc_info.value.details["field"]

    def test_non_mapping_yaml_raises_parse_error(self, tmp_path: Path) -> None:
        """A YAML document that is not a mapping is rejected."""
        (tmp_path / CONFIG_FILENAME).write_text("- just\n- a list\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code is ErrorCode.CONFIG_PARSE_ERROR
