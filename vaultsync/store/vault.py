"""HashiCorp Vault KV v2 store client.

Wraps a synchronous ``hvac.Client``. A single client is shared by every
source processor thread; hvac keeps no per-call state on it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import hvac
import requests

from vaultsync.config import VaultSettings
from vaultsync.errors import StoreConnectionError, StoreOperationError
from vaultsync.store.base import StoreStatus

logger = logging.getLogger(__name__)


class VaultStoreClient:
    """Writes and deletes secrets under one KV v2 mount.

    Parameters
    ----------
    settings : VaultSettings
        Address, namespace, token, mount path and request timeout.
    client : hvac.Client | None
        A pre-built client. Built from *settings* when *None*.
    """

    def __init__(
        self,
        settings: VaultSettings,
        client: hvac.Client | None = None,
    ) -> None:
        self.settings = settings
        self._client = client or self._create_hvac_client(settings)

    @staticmethod
    def _create_hvac_client(settings: VaultSettings) -> hvac.Client:
        return hvac.Client(
            url=settings.addr,
            token=settings.token,
            namespace=settings.namespace or None,
            timeout=settings.timeout,
        )

    # -- startup -------------------------------------------------------------

    def status(self) -> StoreStatus:
        """Read seal status and token policies.

        Raises:
            StoreConnectionError: if Vault is unreachable or the token is
                rejected.
        """
        try:
            seal = self._client.sys.read_seal_status()
        except (hvac.exceptions.VaultError, requests.exceptions.RequestException) as e:
            raise StoreConnectionError(
                f"Unable to reach Vault at {self.settings.addr}: {e}"
            ) from e

        try:
            token = self._client.auth.token.lookup_self()
        except (hvac.exceptions.VaultError, requests.exceptions.RequestException) as e:
            raise StoreConnectionError(f"Vault rejected the token: {e}") from e

        return StoreStatus(
            cluster_name=seal.get("cluster_name", ""),
            initialized=bool(seal.get("initialized", False)),
            sealed=bool(seal.get("sealed", False)),
            policies=tuple(token.get("data", {}).get("policies", [])),
        )

    def connect(self) -> StoreStatus:
        """Verify the store is usable before any work starts.

        Raises:
            StoreConnectionError: if Vault is unreachable, sealed, or the
                token is rejected.
        """
        status = self.status()
        logger.info("Found Vault: %s", status.cluster_name)
        logger.info("Initialized: %s", status.initialized)
        logger.info("Sealed: %s", status.sealed)
        logger.info("Token Policies: %s", list(status.policies))

        if status.sealed:
            raise StoreConnectionError(f"Vault at {self.settings.addr} is sealed")
        return status

    # -- secret operations ---------------------------------------------------

    def write(self, path: str, fields: Mapping[str, str]) -> None:
        """Create or fully replace the secret at *path*."""
        try:
            self._client.secrets.kv.v2.create_or_update_secret(
                path=path,
                secret=dict(fields),
                mount_point=self.settings.kv_path,
            )
        except (hvac.exceptions.VaultError, requests.exceptions.RequestException) as e:
            raise StoreOperationError(path, _describe(e)) from e

    def delete(self, path: str) -> None:
        """Delete every version and the metadata of the secret at *path*.

        A path that does not exist is already deleted.
        """
        try:
            self._client.secrets.kv.v2.delete_metadata_and_all_versions(
                path=path,
                mount_point=self.settings.kv_path,
            )
        except hvac.exceptions.InvalidPath:
            logger.debug("Secret %s already absent", path)
        except (hvac.exceptions.VaultError, requests.exceptions.RequestException) as e:
            raise StoreOperationError(path, _describe(e)) from e


def _describe(error: Exception) -> str:
    message = str(error).strip()
    return f"{type(error).__name__}: {message}" if message else type(error).__name__
