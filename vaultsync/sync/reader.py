"""Source reading — load every row of one CSV source into memory.

Operational CSVs are often exported from spreadsheet tools, so input is
decoded as UTF-8 (dropping a BOM) and, failing that, with the encoding
charset-normalizer considers most likely.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from charset_normalizer import from_bytes

from vaultsync.errors import SourceReadError

logger = logging.getLogger(__name__)


def decode_source(raw: bytes) -> str:
    """Decode raw CSV bytes to text."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is None:
        raise SourceReadError("unable to detect the file encoding")
    logger.debug("Decoding source as %s", match.encoding)
    return str(match)


def read_rows(source_path: str | Path) -> list[dict[str, str]]:
    """Read all rows of a CSV source, keyed by header name.

    A source that does not exist yields no rows. Missing cells in short
    rows are returned as empty strings; cells beyond the header are dropped.

    Raises:
        SourceReadError: if the file cannot be read or parsed.
    """
    path = Path(source_path)
    if not path.exists():
        logger.info("Source %s does not exist, treating it as empty", path)
        return []

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SourceReadError(f"cannot read {path}: {e}") from e

    text = decode_source(raw)
    reader = csv.DictReader(io.StringIO(text, newline=""), restval="")
    try:
        return [
            {key: value or "" for key, value in row.items() if key is not None}
            for row in reader
        ]
    except csv.Error as e:
        raise SourceReadError(f"malformed CSV at line {reader.line_num}: {e}") from e
