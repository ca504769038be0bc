"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority, used for CLI flags)
2. Environment variables (MOCKWRIGHT__SECTION__KEY)
3. Project config (.mockwright.yaml in the working directory)
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from mockwright.config.models import (
    GenerateConfig,
    LoggingConfig,
    MockwrightConfig,
    RegisterConfig,
)
from mockwright.core.errors import ConfigError

CONFIG_FILENAME = ".mockwright.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class bound to one YAML document."""

    class MockwrightSettings(BaseSettings):
        """Root config. Env vars: MOCKWRIGHT__LOGGING__LEVEL, MOCKWRIGHT__GENERATE__CASE, etc."""

        model_config = SettingsConfigDict(
            env_prefix="MOCKWRIGHT__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        generate: GenerateConfig = GenerateConfig()
        registration: RegisterConfig = RegisterConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return MockwrightSettings


def load_config(project_dir: Path | None = None, **kwargs: Any) -> MockwrightConfig:
    """Load config: defaults < .mockwright.yaml < env vars < kwargs.

    Args:
        project_dir: Directory holding .mockwright.yaml.
                     Defaults to current working directory.
        **kwargs: Section overrides, e.g. ``generate={"in_package": True}``.
                  Merged into the YAML document so partial sections keep
                  their file and default values.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    project_dir = project_dir or Path.cwd()
    yaml_config = _load_yaml(project_dir / CONFIG_FILENAME)
    if not isinstance(yaml_config, dict):
        raise ConfigError.parse_error(
            str(project_dir / CONFIG_FILENAME), "top level must be a mapping"
        )

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls()
        data = _deep_merge(settings.model_dump(), kwargs)
        return MockwrightConfig.model_validate(data)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
