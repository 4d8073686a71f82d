"""Path normalization — turn raw column text into store-safe segments."""

import re

_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_NOT_NAME_CHAR = re.compile(r"[^A-Za-z0-9_]+")


def normalize_segment(value: str, is_path_segment: bool) -> str:
    """Normalize a folder (path) or secret name column value.

    Both modes trim surrounding spaces, turn internal spaces into ``_`` and
    backslashes into ``/``. Path mode then drops every non-ASCII character and
    one leading ``/``; name mode keeps only ``[A-Za-z0-9_]``.

    May return an empty string; callers decide whether that is valid.
    """
    value = value.strip(" ")
    value = value.replace(" ", "_")
    value = value.replace("\\", "/")

    if is_path_segment:
        value = _NON_ASCII.sub("", value)
        if value.startswith("/"):
            value = value[1:]
        return value

    return _NOT_NAME_CHAR.sub("", value)
