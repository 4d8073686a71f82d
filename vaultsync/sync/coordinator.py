"""Batch coordination — fan work out across sources and fold the results.

A run moves through Idle -> Discovering -> Running -> Aggregating -> Done.
Each source gets its own worker; outcomes come back as immutable values and
are folded by the coordinator thread alone, so workers share nothing but
the store client.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from vaultsync.config import CSV_EXTENSION, SyncConfig
from vaultsync.errors import SourceDiscoveryError
from vaultsync.store.base import StoreClient
from vaultsync.sync.operation import Operation
from vaultsync.sync.processor import RecordError, SourceOutcome, SourceProcessor

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    RUNNING = "running"
    AGGREGATING = "aggregating"
    DONE = "done"


@dataclass(frozen=True)
class BatchReport:
    """Totals for a whole run."""

    total_records: int
    total_errors: int
    operation: Operation
    elapsed_seconds: float
    outcomes: tuple[SourceOutcome, ...] = field(default_factory=tuple)

    @property
    def failed_records(self) -> list[tuple[str, RecordError]]:
        """(source path, error) pairs across all sources."""
        return [
            (outcome.source_path, error)
            for outcome in self.outcomes
            for error in outcome.errors
        ]

    @property
    def cancelled(self) -> bool:
        return any(outcome.cancelled for outcome in self.outcomes)

    def summary(self) -> str:
        text = (
            f"Successfully {self.operation.past_tense} {self.total_records} secrets "
            f"in {self.elapsed_seconds:.0f} seconds"
        )
        if self.total_errors:
            text += f" with {self.total_errors} errors"
        return text


def discover_sources(config: SyncConfig) -> list[Path]:
    """Resolve the list of CSV sources for a run.

    A single input file is returned as-is (it need not exist). For an input
    directory, the immediate non-directory entries ending in ``.csv`` are
    returned in name order.

    Raises:
        SourceDiscoveryError: if the input directory cannot be listed.
    """
    if config.csv_file:
        return [Path(config.csv_file)]

    directory = Path(config.csv_path)
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as e:
        raise SourceDiscoveryError(f"Cannot list input directory {directory}: {e}") from e

    return [
        Path(entry.path)
        for entry in entries
        if not entry.is_dir() and entry.name.endswith(CSV_EXTENSION)
    ]


class BatchCoordinator:
    """Runs one :class:`SourceProcessor` per source and aggregates outcomes."""

    def __init__(self, store: StoreClient, config: SyncConfig):
        self.store = store
        self.config = config
        self.state = RunState.IDLE
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        """Stop starting new records; in-flight store calls finish."""
        self._cancel_event.set()

    def run(self) -> BatchReport:
        """Process every source and return the aggregated report.

        Raises:
            SourceDiscoveryError: if the input directory cannot be listed.
            RuntimeError: if the coordinator has already run.
        """
        if self.state is not RunState.IDLE:
            raise RuntimeError(f"Coordinator cannot run from state {self.state.value}")

        start = time.monotonic()
        operation = self.config.operation

        self.state = RunState.DISCOVERING
        try:
            sources = discover_sources(self.config)
        except SourceDiscoveryError:
            self.state = RunState.DONE
            raise
        if self.config.csv_path:
            logger.info("Processing %d files", len(sources))

        self.state = RunState.RUNNING
        outcomes = self._run_sources(sources)

        self.state = RunState.AGGREGATING
        total_records = 0
        total_errors = 0
        for outcome in outcomes:
            total_records += outcome.record_count
            total_errors += outcome.error_count

        report = BatchReport(
            total_records=total_records,
            total_errors=total_errors,
            operation=operation,
            elapsed_seconds=time.monotonic() - start,
            outcomes=tuple(sorted(outcomes, key=lambda o: o.source_path)),
        )
        self.state = RunState.DONE
        return report

    def _run_sources(self, sources: list[Path]) -> list[SourceOutcome]:
        if not sources:
            return []

        processor = SourceProcessor(self.store, self.config)
        max_workers = self.config.max_workers or len(sources)
        outcomes: list[SourceOutcome] = []

        with ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="vaultsync-source"
        ) as executor:
            pending: dict[Future, Path] = {
                executor.submit(processor.process, source, self._cancel_event): source
                for source in sources
            }
            while pending:
                try:
                    done, _ = wait(pending, timeout=0.5, return_when=FIRST_COMPLETED)
                except KeyboardInterrupt:
                    logger.warning("Interrupted: letting in-flight secrets finish")
                    self.cancel()
                    continue
                for future in done:
                    source = pending.pop(future)
                    outcomes.append(self._collect(future, source))

        return outcomes

    @staticmethod
    def _collect(future: Future, source: Path) -> SourceOutcome:
        try:
            return future.result()
        except Exception as e:
            logger.error("error: processing %s failed: %s", source, e)
            return SourceOutcome(
                source_path=str(source),
                record_count=0,
                errors=(RecordError(record_path=str(source), message=str(e)),),
            )
