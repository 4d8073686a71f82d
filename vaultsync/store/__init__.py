"""Secret store clients.

- StoreClient: the protocol the sync engine depends on
- VaultStoreClient: HashiCorp Vault KV v2 via hvac
- MemoryStoreClient: in-process store for dry runs
"""

from vaultsync.store.base import StoreClient, StoreStatus
from vaultsync.store.memory import MemoryStoreClient
from vaultsync.store.vault import VaultStoreClient

__all__ = [
    "StoreClient",
    "StoreStatus",
    "MemoryStoreClient",
    "VaultStoreClient",
]
