"""The store capability the sync engine depends on."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoreStatus:
    """Health and identity of a secret store, as seen at startup."""

    cluster_name: str
    initialized: bool
    sealed: bool
    policies: tuple[str, ...] = ()


class StoreClient(Protocol):
    """A versioned key-value secret store.

    Implementations must be safe to share between threads. ``write`` and
    ``delete`` raise :class:`~vaultsync.errors.StoreOperationError` on
    failure; deleting an absent path succeeds.
    """

    def write(self, path: str, fields: Mapping[str, str]) -> None: ...

    def delete(self, path: str) -> None: ...

    def status(self) -> StoreStatus: ...
