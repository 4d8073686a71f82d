"""Tests for CSV source reading."""

import tempfile
from pathlib import Path

from vaultsync.sync.reader import decode_source, read_rows


def test_read_rows_keyed_by_header():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "secrets.csv"
        path.write_text("Secret Name,Folder,user\nDB Pass,team,admin\nAPI Key,team,svc\n")

        rows = read_rows(path)
        assert rows == [
            {"Secret Name": "DB Pass", "Folder": "team", "user": "admin"},
            {"Secret Name": "API Key", "Folder": "team", "user": "svc"},
        ]


def test_read_rows_missing_source_is_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "missing.csv"
        assert read_rows(path) == []
        assert not path.exists()


def test_read_rows_header_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "empty.csv"
        path.write_text("Secret Name,Folder,user\n")
        assert read_rows(path) == []


def test_read_rows_pads_short_rows_and_drops_extra_cells():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "ragged.csv"
        path.write_text("Secret Name,Folder,user\nshort,team\nlong,team,admin,extra\n")

        rows = read_rows(path)
        assert rows[0] == {"Secret Name": "short", "Folder": "team", "user": ""}
        assert rows[1] == {"Secret Name": "long", "Folder": "team", "user": "admin"}


def test_read_rows_quoted_values():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "quoted.csv"
        path.write_text('Secret Name,Folder,note\nkey,team,"a, b\nc"\n')

        rows = read_rows(path)
        assert rows[0]["note"] == "a, b\nc"


def test_read_rows_strips_utf8_bom():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bom.csv"
        path.write_bytes("Secret Name,Folder\nkey,team\n".encode("utf-8-sig"))

        rows = read_rows(path)
        assert list(rows[0]) == ["Secret Name", "Folder"]


def test_decode_source_utf8():
    assert decode_source("Folder\nMontréal\n".encode("utf-8")) == "Folder\nMontréal\n"


def test_decode_source_detects_legacy_encoding():
    # Latin-1 bytes are not valid UTF-8
    raw = "name,city\nPaul,Montréal\n".encode("latin-1")
    assert "Montréal" in decode_source(raw)
