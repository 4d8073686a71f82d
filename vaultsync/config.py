"""Configuration — immutable settings passed to every component.

Settings come from three layers, highest precedence first:
1. Explicit CLI flags
2. An optional YAML config file
3. Built-in defaults
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from vaultsync.errors import ConfigurationError
from vaultsync.sync.operation import Operation


DEFAULT_VAULT_ADDR = "http://127.0.0.1:8200"
DEFAULT_NAMESPACE = "root"
DEFAULT_KV_PATH = "kv"
DEFAULT_TIMEOUT = 30.0
DEFAULT_SECRET_COLUMN = "Secret Name"
DEFAULT_PATH_COLUMN = "Folder"
CSV_EXTENSION = ".csv"


@dataclass(frozen=True)
class VaultSettings:
    """Connection settings for the Vault KV v2 backend."""

    addr: str = DEFAULT_VAULT_ADDR
    namespace: str = DEFAULT_NAMESPACE
    token: str = field(default="", repr=False)
    kv_path: str = DEFAULT_KV_PATH
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class SyncConfig:
    """Everything a sync run needs to know, fixed before the run starts."""

    vault: VaultSettings = field(default_factory=VaultSettings)
    csv_file: str = ""
    csv_path: str = ""
    secret_column: str = DEFAULT_SECRET_COLUMN
    path_column: str = DEFAULT_PATH_COLUMN
    max_workers: int | None = None
    verbose: bool = False
    undo: bool = False
    dry_run: bool = False
    strict: bool = False

    @property
    def operation(self) -> Operation:
        return Operation.DELETE if self.undo else Operation.UPSERT

    def validate(self) -> None:
        """Reject missing or conflicting settings.

        Raises:
            ConfigurationError: describing the first problem found.
        """
        if not self.csv_file and not self.csv_path:
            raise ConfigurationError(
                "One of --input-csv-file or --input-csv-path is required"
            )
        if self.csv_file and self.csv_path:
            raise ConfigurationError(
                "Only one of --input-csv-path and --input-csv-file may be specified"
            )
        if not self.vault.token and not self.dry_run:
            raise ConfigurationError("A Vault token is required (--vault-token or VAULT_TOKEN)")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError("--max-workers must be at least 1")
        if not self.secret_column or not self.path_column:
            raise ConfigurationError("Source column names must not be empty")
        if self.secret_column == self.path_column:
            raise ConfigurationError(
                "The secret name column and the path column must differ"
            )

    def merged(self, **overrides: Any) -> SyncConfig:
        """Return a copy with every non-None override applied.

        Keys prefixed with ``vault_`` are applied to the nested
        :class:`VaultSettings`.
        """
        vault_changes = {}
        changes = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key.startswith("vault_"):
                vault_changes[key[len("vault_"):]] = value
            else:
                changes[key] = value
        return replace(self, vault=replace(self.vault, **vault_changes), **changes)


# YAML section -> {yaml key: override key}
_FILE_LAYOUT: dict[str, dict[str, str]] = {
    "vault": {
        "addr": "vault_addr",
        "namespace": "vault_namespace",
        "token": "vault_token",
        "kv_path": "vault_kv_path",
        "timeout": "vault_timeout",
    },
    "input": {
        "csv_file": "csv_file",
        "csv_path": "csv_path",
    },
    "columns": {
        "secret_name": "secret_column",
        "path": "path_column",
    },
}
_TOP_LEVEL_KEYS = {"max_workers", "verbose", "undo", "dry_run", "strict"}

# override key -> (expected type, description)
_VALUE_TYPES: dict[str, tuple[type, str]] = {
    "vault_addr": (str, "a string"),
    "vault_namespace": (str, "a string"),
    "vault_token": (str, "a string"),
    "vault_kv_path": (str, "a string"),
    "vault_timeout": (float, "a number"),
    "csv_file": (str, "a string"),
    "csv_path": (str, "a string"),
    "secret_column": (str, "a string"),
    "path_column": (str, "a string"),
    "max_workers": (int, "an integer"),
    "verbose": (bool, "true or false"),
    "undo": (bool, "true or false"),
    "dry_run": (bool, "true or false"),
    "strict": (bool, "true or false"),
}


def _coerce(name: str, key: str, value: Any) -> Any:
    """Check a config file value against the type its setting expects.

    ``None`` (an empty YAML value) leaves the setting at its default.
    """
    if value is None:
        return None
    expected, description = _VALUE_TYPES[key]
    if expected is bool:
        ok = isinstance(value, bool)
    elif expected is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        value = float(value) if ok else value
    elif expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ConfigurationError(
            f"Config key '{name}' must be {description}, got {value!r}"
        )
    return value


def load_config_file(path: str | Path) -> SyncConfig:
    """Load a :class:`SyncConfig` from a YAML file.

    Raises:
        ConfigurationError: if the file is unreadable, not a mapping, or
            contains unknown keys or values of the wrong type.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key in _FILE_LAYOUT:
            if not isinstance(value, dict):
                raise ConfigurationError(f"Config section '{key}' must be a mapping")
            layout = _FILE_LAYOUT[key]
            for sub_key, sub_value in value.items():
                if sub_key not in layout:
                    raise ConfigurationError(f"Unknown config key '{key}.{sub_key}'")
                overrides[layout[sub_key]] = _coerce(
                    f"{key}.{sub_key}", layout[sub_key], sub_value
                )
        elif key in _TOP_LEVEL_KEYS:
            overrides[key] = _coerce(key, key, value)
        else:
            raise ConfigurationError(f"Unknown config key '{key}'")

    return SyncConfig().merged(**overrides)

