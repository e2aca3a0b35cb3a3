from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.extraction_result import ExtractionOptions

"""Config loader.

Responsibilities:
- Load YAML config (default config/mailmerge.yml)
- Validate against the packaged JSON schema (config_schema.json)
- Apply defaults for missing keys
- Apply environment overrides (MAILMERGE_STORE_PATH)
"""

__all__ = [
    "ConfigError",
    "MailMergeConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_STORE_PATH",
    "STORE_PATH_ENV",
    "default_config",
    "load_config",
    "apply_env_overrides",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_CONFIG_PATH = Path("config/mailmerge.yml")
DEFAULT_STORE_PATH = ".mailmerge/store.json"
STORE_PATH_ENV = "MAILMERGE_STORE_PATH"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class MailMergeConfig:
    remove_duplicates: bool = True
    remove_invalid: bool = True
    show_unsent_only: bool = False
    store_path: str = DEFAULT_STORE_PATH

    @property
    def extraction_options(self) -> ExtractionOptions:
        return ExtractionOptions(
            remove_duplicates=self.remove_duplicates,
            remove_invalid=self.remove_invalid,
        )


def default_config() -> MailMergeConfig:
    return MailMergeConfig()


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or the data violates it
            (unknown keys, wrong types, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> MailMergeConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    defaults = default_config()
    return MailMergeConfig(
        remove_duplicates=data.get("remove_duplicates", defaults.remove_duplicates),
        remove_invalid=data.get("remove_invalid", defaults.remove_invalid),
        show_unsent_only=data.get("show_unsent_only", defaults.show_unsent_only),
        store_path=data.get("store_path", defaults.store_path),
    )


def apply_env_overrides(cfg: MailMergeConfig) -> MailMergeConfig:
    """Environment wins over the YAML file (.env is loaded before this runs)."""
    store_path = os.getenv(STORE_PATH_ENV)
    if store_path:
        return replace(cfg, store_path=store_path)
    return cfg
