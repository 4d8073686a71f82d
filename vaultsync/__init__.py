"""vaultsync — bulk-synchronize CSV-described secrets into Vault KV v2."""

__version__ = "0.1.0"
