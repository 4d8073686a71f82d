"""Tests for row translation."""

import pytest

from vaultsync.errors import InvalidRecordPathError
from vaultsync.sync.translator import SecretRecord, build_path, translate_row


NAME = "Secret Name"
FOLDER = "Folder"


def test_translate_scenario_row():
    row = {"Secret Name": "DB Pass ", "Folder": "team one\\sub", "user": "admin", "pass": ""}
    record = translate_row(row, NAME, FOLDER)
    assert record == SecretRecord(path="team_one/sub/DB_Pass", fields={"user": "admin"})


def test_translate_excludes_source_columns():
    row = {"Secret Name": "key", "Folder": "apps", "token": "abc", "url": "https://x"}
    record = translate_row(row, NAME, FOLDER)
    assert NAME not in record.fields
    assert FOLDER not in record.fields
    assert record.fields == {"token": "abc", "url": "https://x"}


def test_translate_keeps_field_names_verbatim():
    row = {"Secret Name": "key", "Folder": "apps", "User Name": "bob", "pass-word": "pw"}
    record = translate_row(row, NAME, FOLDER)
    assert set(record.fields) == {"User Name", "pass-word"}
    assert record.field_names == ["User Name", "pass-word"]


def test_translate_skips_missing_values():
    row = {"Secret Name": "key", "Folder": "apps", "token": None, "note": ""}
    record = translate_row(row, NAME, FOLDER)
    assert record.fields == {}


def test_translate_custom_columns():
    row = {"Title": "Mail Relay", "Group": "infra", "host": "smtp"}
    record = translate_row(row, "Title", "Group")
    assert record.path == "infra/Mail_Relay"
    assert record.fields == {"host": "smtp"}


def test_translate_empty_folder_is_invalid():
    row = {"Secret Name": "key", "Folder": "", "token": "abc"}
    with pytest.raises(InvalidRecordPathError) as exc_info:
        translate_row(row, NAME, FOLDER)
    assert exc_info.value.path == "/key"


def test_translate_empty_name_is_invalid():
    row = {"Secret Name": "???", "Folder": "apps"}
    with pytest.raises(InvalidRecordPathError) as exc_info:
        translate_row(row, NAME, FOLDER)
    assert exc_info.value.path == "apps/"


def test_translate_trailing_folder_slash_is_invalid():
    row = {"Secret Name": "key", "Folder": "apps\\"}
    with pytest.raises(InvalidRecordPathError):
        translate_row(row, NAME, FOLDER)


def test_translate_missing_columns_is_invalid():
    with pytest.raises(InvalidRecordPathError):
        translate_row({"token": "abc"}, NAME, FOLDER)


def test_build_path():
    assert build_path("/ops\\db", "Root Login") == "ops/db/Root_Login"


def test_records_are_hashable_by_path():
    first = SecretRecord(path="apps/key", fields={"user": "a"})
    second = SecretRecord(path="apps/key", fields={"user": "b"})
    assert hash(first) == hash(second)
    assert first != second
    assert len({first, SecretRecord(path="apps/other")}) == 2
