"""CLI entry point for workload certificate refresh.

Invoked by a scheduler as a bare command::

    gce-workload-certs-refresh

which runs a single refresh cycle, or, during development::

    python -m workload_certs.cli.main [COMMAND]

Commands
--------
refresh   Run one refresh cycle (the default)
status    Show the currently published credential bundle
version   Show version information

Exit status is 0 when the cycle published or was skipped, 1 on the first
unrecovered failure.
"""
from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from workload_certs.config import Settings
from workload_certs.credentials.inspect import inspect_bundle
from workload_certs.errors import WorkloadCertsError
from workload_certs.metadata.client import HttpMetadataClient
from workload_certs.rotation.refresher import CredentialRefresher

PROGRAM_NAME = "gce_workload_certs_refresh"

console = Console()
logger = logging.getLogger(PROGRAM_NAME)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr as ``YYYY/MM/DD HH:MM:SS: message``."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s: %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
        force=True,
    )


def build_client(settings: Settings) -> HttpMetadataClient:
    """Return the metadata client used by ``refresh``."""
    return HttpMetadataClient(
        base_url=settings.metadata_url,
        timeout=settings.timeout,
        attempts=settings.attempts,
    )


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except WorkloadCertsError as exc:
        logger.error("%s", exc)
        sys.exit(1)


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Rotate workload identity certificates from the metadata server"""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(refresh_command)


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from workload_certs import __version__

    console.print(f"[bold]{PROGRAM_NAME}[/bold] v{__version__}")


# ------------------------------------------------------------------
# refresh
# ------------------------------------------------------------------


@cli.command(name="refresh")
def refresh_command() -> None:
    """Fetch workload credentials and atomically publish them."""
    settings = _load_settings()
    try:
        with build_client(settings) as client:
            result = CredentialRefresher(client, settings.output_paths()).refresh()
    except WorkloadCertsError as exc:
        logger.error("Failed to refresh workload credentials: %s", exc)
        sys.exit(1)
    finally:
        logger.info("Done")

    if result.rotated:
        logger.info("Published workload credentials for %s", result.spiffe_id)
    else:
        logger.info("No rotation: %s", result.reason)


# ------------------------------------------------------------------
# status
# ------------------------------------------------------------------


@cli.command(name="status")
def status_command() -> None:
    """Show the credential bundle currently behind the stable symlink."""
    settings = _load_settings()
    status = inspect_bundle(settings.symlink)

    if status.target is None:
        console.print(f"[yellow]No credentials published at[/yellow] {status.stable_symlink}")
        sys.exit(1)

    table = Table(title="Workload Credentials", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Symlink", str(status.stable_symlink))
    table.add_row("Content dir", str(status.target))
    table.add_row("Files", ", ".join(status.present_files) or "(none)")
    if status.missing_files:
        table.add_row("Missing", f"[red]{', '.join(status.missing_files)}[/red]")
    if status.parse_error:
        table.add_row("Certificate", f"[yellow]unparseable: {escape(status.parse_error)}[/yellow]")
    else:
        table.add_row("Subject", escape(status.subject) or "-")
        table.add_row("SPIFFE ID", ", ".join(status.spiffe_ids) or "-")
        if status.not_after is not None:
            table.add_row("Not after", status.not_after.isoformat())
            table.add_row("Days remaining", str(status.days_remaining()))
    console.print(table)

    if not status.published:
        sys.exit(1)


if __name__ == "__main__":
    cli()
