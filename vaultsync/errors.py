"""Exception taxonomy for vaultsync.

Three families:
- Configuration errors are raised before any store connection is attempted.
- Fatal errors (store connection, source discovery) abort the whole run.
- Per-record errors are caught by the source processor and recorded in the
  source outcome; they never abort a run.
"""

from __future__ import annotations


class VaultSyncError(Exception):
    """Base class for all vaultsync errors."""


# --- Configuration ---


class ConfigurationError(VaultSyncError):
    """Missing, conflicting, or unreadable settings."""


# --- Fatal ---


class FatalSyncError(VaultSyncError):
    """An error after which no work can proceed."""


class StoreConnectionError(FatalSyncError):
    """The secret store is unreachable, sealed, or rejected the token."""


class SourceDiscoveryError(FatalSyncError):
    """The input directory could not be listed."""


# --- Per-record ---


class RecordFailure(VaultSyncError):
    """A failure confined to a single record or source."""


class StoreOperationError(RecordFailure):
    """A write or delete call against the store failed."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path
        self.message = message


class InvalidRecordPathError(RecordFailure):
    """A row normalized to a path with an empty segment."""

    def __init__(self, path: str):
        super().__init__(f"invalid secret path '{path}': empty path segment")
        self.path = path


class SourceReadError(RecordFailure):
    """A source file could not be read or parsed as CSV."""
