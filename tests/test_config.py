"""Tests for configuration loading and validation."""

import tempfile
from pathlib import Path

import pytest
import yaml

from vaultsync.config import SyncConfig, VaultSettings, load_config_file
from vaultsync.errors import ConfigurationError
from vaultsync.sync.operation import Operation


def _valid(**kwargs) -> SyncConfig:
    return SyncConfig(vault=VaultSettings(token="s.token"), **kwargs)


# --- Validation ---


def test_validate_accepts_single_file():
    _valid(csv_file="secrets.csv").validate()


def test_validate_requires_input():
    with pytest.raises(ConfigurationError):
        _valid().validate()


def test_validate_rejects_both_inputs():
    with pytest.raises(ConfigurationError, match="Only one"):
        _valid(csv_file="a.csv", csv_path="dir").validate()


def test_validate_requires_token():
    with pytest.raises(ConfigurationError, match="token"):
        SyncConfig(csv_file="a.csv").validate()


def test_validate_dry_run_needs_no_token():
    SyncConfig(csv_file="a.csv", dry_run=True).validate()


def test_validate_rejects_bad_worker_count():
    with pytest.raises(ConfigurationError):
        _valid(csv_file="a.csv", max_workers=0).validate()


def test_validate_rejects_identical_columns():
    with pytest.raises(ConfigurationError):
        _valid(csv_file="a.csv", secret_column="X", path_column="X").validate()


def test_operation_follows_undo():
    assert SyncConfig().operation == Operation.UPSERT
    assert SyncConfig(undo=True).operation == Operation.DELETE


def test_token_hidden_from_repr():
    assert "s.token" not in repr(_valid())


# --- Merging ---


def test_merged_ignores_none_and_routes_vault_keys():
    config = SyncConfig().merged(
        vault_addr="https://vault:8200",
        vault_token="abc",
        csv_file="a.csv",
        csv_path=None,
        verbose=None,
    )
    assert config.vault.addr == "https://vault:8200"
    assert config.vault.token == "abc"
    assert config.vault.namespace == "root"
    assert config.csv_file == "a.csv"
    assert config.verbose is False


# --- File loading ---


def test_load_config_file():
    data = {
        "vault": {"addr": "https://vault:8200", "kv_path": "secret", "timeout": 10},
        "input": {"csv_path": "./exports"},
        "columns": {"secret_name": "Title", "path": "Group"},
        "max_workers": 4,
        "verbose": True,
    }
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "vaultsync.yaml"
        path.write_text(yaml.dump(data))
        config = load_config_file(path)

    assert config.vault.addr == "https://vault:8200"
    assert config.vault.kv_path == "secret"
    assert config.vault.timeout == 10.0
    assert config.csv_path == "./exports"
    assert config.secret_column == "Title"
    assert config.path_column == "Group"
    assert config.max_workers == 4
    assert config.verbose is True


def test_load_config_file_empty_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "empty.yaml"
        path.write_text("")
        assert load_config_file(path) == SyncConfig()


def test_load_config_file_unknown_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bad.yaml"
        path.write_text(yaml.dump({"vault": {"adress": "x"}}))
        with pytest.raises(ConfigurationError, match="vault.adress"):
            load_config_file(path)


def test_load_config_file_missing():
    with pytest.raises(ConfigurationError):
        load_config_file("/nonexistent/vaultsync.yaml")


def test_load_config_file_not_a_mapping():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError):
            load_config_file(path)


def test_load_config_file_rejects_wrong_value_types():
    bad_values = [
        {"max_workers": "four"},
        {"max_workers": True},
        {"verbose": "yes please"},
        {"vault": {"timeout": "soon"}},
        {"vault": {"addr": 8200}},
        {"columns": {"secret_name": ["a", "b"]}},
    ]
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "typed.yaml"
        for data in bad_values:
            path.write_text(yaml.dump(data))
            with pytest.raises(ConfigurationError, match="must be"):
                load_config_file(path)


def test_load_config_file_empty_value_keeps_default():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "blank.yaml"
        path.write_text("max_workers:\nvault:\n  kv_path:\n")
        config = load_config_file(path)

    assert config.max_workers is None
    assert config.vault.kv_path == "kv"
