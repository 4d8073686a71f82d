"""Source processing — apply one operation to every row of one CSV source.

A source is processed start to finish by a single worker. Rows are handled
in file order and a failing row never stops the rows after it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from vaultsync.config import SyncConfig
from vaultsync.errors import (
    InvalidRecordPathError,
    SourceReadError,
    StoreOperationError,
)
from vaultsync.store.base import StoreClient
from vaultsync.sync.operation import Operation
from vaultsync.sync.reader import read_rows
from vaultsync.sync.translator import SecretRecord, translate_row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordError:
    """One failed record: the path it targeted and why it failed."""

    record_path: str
    message: str


@dataclass(frozen=True)
class SourceOutcome:
    """Result of processing a single source."""

    source_path: str
    record_count: int
    errors: tuple[RecordError, ...] = field(default_factory=tuple)
    cancelled: bool = False

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def summary(self) -> str:
        text = f"{self.source_path}: {self.record_count} secrets"
        if self.errors:
            text += f", {self.error_count} errors"
        if self.cancelled:
            text += " (cancelled)"
        return text


class SourceProcessor:
    """Translates and applies every row of a source against a store."""

    def __init__(self, store: StoreClient, config: SyncConfig):
        self.store = store
        self.config = config
        self.operation = config.operation

    def process(
        self,
        source_path: str | Path,
        cancel_event: threading.Event | None = None,
    ) -> SourceOutcome:
        """Process one source and return its outcome.

        Args:
            source_path: CSV file to read. A missing file has zero records.
            cancel_event: When set, no further records are started.
        """
        source = str(source_path)

        try:
            rows = read_rows(source_path)
        except SourceReadError as e:
            logger.error("error: unable to read %s: %s", source, e)
            return SourceOutcome(
                source_path=source,
                record_count=0,
                errors=(RecordError(record_path=source, message=str(e)),),
            )

        errors: list[RecordError] = []
        attempted = 0
        cancelled = False

        for row in rows:
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                break
            attempted += 1

            try:
                record = translate_row(
                    row, self.config.secret_column, self.config.path_column
                )
            except InvalidRecordPathError as e:
                errors.append(self._failure(source, e.path, str(e)))
                continue

            try:
                self._apply(record)
            except StoreOperationError as e:
                errors.append(self._failure(source, record.path, e.message))
            except Exception as e:
                # Store clients may raise transport errors of their own
                errors.append(self._failure(source, record.path, _describe(e)))

        if cancelled:
            logger.warning(
                "Cancelled %s after %d of %d secrets", source, attempted, len(rows)
            )
        else:
            logger.info("Finished processing %s (%d secrets)", source, attempted)

        return SourceOutcome(
            source_path=source,
            record_count=attempted,
            errors=tuple(errors),
            cancelled=cancelled,
        )

    def _apply(self, record: SecretRecord) -> None:
        if self.operation is Operation.DELETE:
            logger.debug("deleting: %s", record.path)
            self.store.delete(record.path)
        else:
            logger.debug(
                "creating: %s with fields %s", record.path, record.field_names
            )
            self.store.write(record.path, record.fields)

    @staticmethod
    def _failure(source: str, path: str, message: str) -> RecordError:
        logger.warning("error: unable to process %s: %s", source, path)
        logger.warning("%s", message)
        return RecordError(record_path=path, message=message)


def _describe(error: Exception) -> str:
    message = str(error).strip()
    return f"{type(error).__name__}: {message}" if message else type(error).__name__
