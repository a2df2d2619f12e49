"""Configuration loading.

Layers, lowest to highest precedence:

- built-in model defaults
- ``~/.config/mentionindex/config.yaml``
- ``<root>/.mentionindex/config.yaml``
- an explicit ``config_file``
- ``MENTIONINDEX__SECTION__KEY`` environment variables
- keyword overrides passed to ``load_config``

YAML layers are deep-merged key by key; env vars and kwargs are resolved by
pydantic-settings on top of them.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from mentionindex.config.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from mentionindex.config.models import (
    IndexConfig,
    LoggingConfig,
    MentionIndexConfig,
    SearchConfig,
    WatcherConfig,
)
from mentionindex.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/mentionindex/config.yaml").expanduser()


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML layer; a missing file is an empty layer."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def config_layers(root: Path, config_file: Path | None = None) -> list[Path]:
    """YAML files consulted for ``root``, lowest precedence first."""
    layers = [GLOBAL_CONFIG_PATH, root / CONFIG_DIR_NAME / CONFIG_FILE_NAME]
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError.file_not_found(str(config_file))
        layers.append(config_file)
    return layers


class _LayeredYamlSource(PydanticBaseSettingsSource):
    """Merged view of several YAML files, read once at construction."""

    def __init__(self, settings_cls: type[BaseSettings], layers: list[Path]) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        for path in layers:
            self._data = _deep_merge(self._data, _load_yaml(path))

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self._data.items() if value is not None}


def _settings_for(layers: list[Path]) -> type[BaseSettings]:
    """Settings class bound to one set of YAML layers."""

    class MentionIndexSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="MENTIONINDEX__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        index: IndexConfig = IndexConfig()
        search: SearchConfig = SearchConfig()
        watcher: WatcherConfig = WatcherConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # First source wins
            return (init_settings, env_settings, _LayeredYamlSource(settings_cls, layers))

    return MentionIndexSettings


def load_config(
    root: Path | None = None, config_file: Path | None = None, **overrides: Any
) -> MentionIndexConfig:
    """Resolve the configuration for a workspace.

    Args:
        root: Workspace root; defaults to the current directory.
        config_file: Extra YAML layered over the workspace file. Unlike the
            implicit layers it must exist.
        **overrides: Per-section values with the highest precedence, e.g.
            ``index={"ttl_sec": 0}``.

    Raises:
        ConfigError: For a missing ``config_file``, malformed YAML, or a
            value that fails validation.
    """
    settings_cls = _settings_for(config_layers(root or Path.cwd(), config_file))
    try:
        settings = settings_cls(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e
    return MentionIndexConfig.model_validate(settings.model_dump())
