"""In-process secret store used for dry runs."""

from __future__ import annotations

import threading
from collections.abc import Mapping

from vaultsync.store.base import StoreStatus


class MemoryStoreClient:
    """Keeps secrets in a dict; writes replace, deletes are idempotent."""

    def __init__(self) -> None:
        self._secrets: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def write(self, path: str, fields: Mapping[str, str]) -> None:
        with self._lock:
            self._secrets[path] = dict(fields)

    def delete(self, path: str) -> None:
        with self._lock:
            self._secrets.pop(path, None)

    def status(self) -> StoreStatus:
        return StoreStatus(cluster_name="memory", initialized=True, sealed=False)

    def read(self, path: str) -> dict[str, str] | None:
        with self._lock:
            secret = self._secrets.get(path)
            return dict(secret) if secret is not None else None

    @property
    def paths(self) -> list[str]:
        with self._lock:
            return sorted(self._secrets)
