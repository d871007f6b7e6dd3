"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (COVANNOT__SECTION__KEY)
3. Project config (.covannot/config.yaml)
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from covannot.config.models import CheckConfig, CovAnnotConfig, LoggingConfig
from covannot.core.errors import ConfigError

CONFIG_DIR_NAME = ".covannot"
CONFIG_FILE_NAME = "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


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
    """Create a Settings class bound to one project's YAML config."""

    class CovAnnotSettings(BaseSettings):
        """Root config. Env vars: COVANNOT__CHECK__FLAKY_POLICY, COVANNOT__LOGGING__LEVEL."""

        model_config = SettingsConfigDict(
            env_prefix="COVANNOT__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        check: CheckConfig = CheckConfig()

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

    return CovAnnotSettings


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(project_root: Path | None = None, **kwargs: Any) -> CovAnnotConfig:
    """Load config: defaults < project YAML < env vars < kwargs.

    Args:
        project_root: Project to load .covannot/config.yaml from.
                      Defaults to current working directory.
        **kwargs: Override values (highest precedence), given per section,
                  e.g. ``check={"flaky_policy": "tested"}``.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    project_root = project_root or Path.cwd()
    yaml_config = _load_yaml(config_path(project_root))

    # Section overrides are merged so a single CLI option keeps the other
    # values of its section from YAML and env.
    settings_cls = _make_settings_class(yaml_config)
    try:
        if kwargs:
            base = settings_cls().model_dump()
            merged = _deep_merge(base, kwargs)
            settings = settings_cls(**merged)
        else:
            settings = settings_cls()
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    return CovAnnotConfig.model_validate(settings.model_dump())
