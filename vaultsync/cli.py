"""vaultsync CLI — bulk-load CSV-described secrets into Vault KV v2."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from vaultsync import __version__

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Route vaultsync logs through rich; DEBUG adds per-record lines."""
    logger = logging.getLogger("vaultsync")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=console, show_time=verbose, show_path=False, markup=False)
    )
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


@click.group()
@click.version_option(version=__version__)
def main():
    """vaultsync — sync secrets from CSV files into HashiCorp Vault.

    Each CSV row becomes one KV v2 secret. The folder column and the secret
    name column make up its path; every other non-empty column becomes a
    field of the secret.
    """


# ── Sync ─────────────────────────────────────────────────────────────


@main.command()
@click.option("--config", "-c", "config_file", default=None,
              type=click.Path(dir_okay=False), help="YAML config file")
@click.option("--vault-addr", envvar="VAULT_ADDR", default=None,
              help="Vault address [default: http://127.0.0.1:8200]")
@click.option("--vault-namespace", envvar="VAULT_NAMESPACE", default=None,
              help="Vault namespace [default: root]")
@click.option("--vault-token", envvar="VAULT_TOKEN", default=None, help="Vault token")
@click.option("--vault-kv-path", default=None, help="Vault KV v2 mount path [default: kv]")
@click.option("--timeout", type=float, default=None,
              help="Vault request timeout in seconds [default: 30]")
@click.option("--input-csv-file", default=None,
              help="Path to a specific CSV file to be processed")
@click.option("--input-csv-path", default=None,
              help="Path to a directory containing one or more CSV files to be processed")
@click.option("--secret-source-column", default=None,
              help="CSV column used for the secret name [default: Secret Name]")
@click.option("--path-source-column", default=None,
              help="CSV column used for the KV path [default: Folder]")
@click.option("--max-workers", type=int, default=None,
              help="Process at most this many files at once [default: all]")
@click.option("--verbose", "-v", is_flag=True, help="Log every secret as it is processed")
@click.option("--undo", is_flag=True,
              help="Delete the secrets referenced in the CSV input instead of creating them")
@click.option("--dry-run", is_flag=True, help="Use an in-memory store; nothing is sent to Vault")
@click.option("--strict", is_flag=True, help="Exit non-zero if any secret failed")
def sync(
    config_file: str | None,
    vault_addr: str | None,
    vault_namespace: str | None,
    vault_token: str | None,
    vault_kv_path: str | None,
    timeout: float | None,
    input_csv_file: str | None,
    input_csv_path: str | None,
    secret_source_column: str | None,
    path_source_column: str | None,
    max_workers: int | None,
    verbose: bool,
    undo: bool,
    dry_run: bool,
    strict: bool,
):
    """Create (or with --undo, delete) the secrets described by CSV files."""
    from vaultsync.config import SyncConfig, load_config_file
    from vaultsync.errors import ConfigurationError, FatalSyncError
    from vaultsync.store import MemoryStoreClient, VaultStoreClient
    from vaultsync.sync.coordinator import BatchCoordinator

    try:
        base = load_config_file(config_file) if config_file else SyncConfig()
        config = base.merged(
            vault_addr=vault_addr,
            vault_namespace=vault_namespace,
            vault_token=vault_token,
            vault_kv_path=vault_kv_path,
            vault_timeout=timeout,
            csv_file=input_csv_file,
            csv_path=input_csv_path,
            secret_column=secret_source_column,
            path_column=path_source_column,
            max_workers=max_workers,
            verbose=verbose or None,
            undo=undo or None,
            dry_run=dry_run or None,
            strict=strict or None,
        )
        config.validate()
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    _configure_logging(config.verbose)

    try:
        if config.dry_run:
            console.print("[yellow]Dry run:[/] secrets are kept in memory, Vault is not contacted")
            store = MemoryStoreClient()
        else:
            store = VaultStoreClient(config.vault)
            store.connect()
            console.print("---")

        coordinator = BatchCoordinator(store, config)
        report = coordinator.run()
    except FatalSyncError as e:
        console.print(f"[red]error:[/] {escape(str(e))}")
        sys.exit(1)

    failures = report.failed_records
    if failures:
        table = Table(title=f"Failed secrets ({len(failures)})")
        table.add_column("Source", style="dim")
        table.add_column("Path", style="cyan")
        table.add_column("Error", style="red")
        for source, error in failures:
            table.add_row(escape(source), escape(error.record_path), escape(error.message))
        console.print(table)

    if report.cancelled:
        console.print(f"[yellow]Cancelled:[/] {report.summary()}")
        sys.exit(130)

    style = "yellow" if report.total_errors else "green"
    console.print(f"[{style}]{report.summary()}[/]")

    if config.strict and report.total_errors:
        console.print("[red]FAIL[/] (strict mode: failed secrets treated as errors)")
        sys.exit(1)


# ── Status ───────────────────────────────────────────────────────────


@main.command()
@click.option("--vault-addr", envvar="VAULT_ADDR", default="http://127.0.0.1:8200",
              show_default=True, help="Vault address")
@click.option("--vault-namespace", envvar="VAULT_NAMESPACE", default="root",
              show_default=True, help="Vault namespace")
@click.option("--vault-token", envvar="VAULT_TOKEN", required=True, help="Vault token")
def status(vault_addr: str, vault_namespace: str, vault_token: str):
    """Show seal status and token policies of a Vault server."""
    from vaultsync.config import VaultSettings
    from vaultsync.errors import StoreConnectionError
    from vaultsync.store import VaultStoreClient

    store = VaultStoreClient(
        VaultSettings(addr=vault_addr, namespace=vault_namespace, token=vault_token)
    )
    try:
        info = store.status()
    except StoreConnectionError as e:
        console.print(f"[red]error:[/] {escape(str(e))}")
        sys.exit(1)

    table = Table(title=f"Vault {vault_addr}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Cluster", info.cluster_name or "(unknown)")
    table.add_row("Initialized", "[green]yes[/]" if info.initialized else "[red]no[/]")
    table.add_row("Sealed", "[red]yes[/]" if info.sealed else "[green]no[/]")
    table.add_row("Token Policies", ", ".join(info.policies) or "(none)")
    console.print(table)


if __name__ == "__main__":
    main()
