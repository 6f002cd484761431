"""Typer CLI for OraLicense-Engine."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="oralicense", help="OraLicense-Engine: Oracle license reconciliation")
console = Console()


def _load_snapshot(path: Path):
    from oralicense_engine.hosts.schemas import HostSnapshot

    return HostSnapshot.model_validate_json(path.read_text(encoding="utf-8"))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the OraLicense-Engine API server."""
    import uvicorn
    from oralicense_engine.app import create_app

    console.print(f"[bold green]Starting OraLicense-Engine on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def reconcile(
    current: Path = typer.Argument(..., exists=True, dir_okay=False, help="Current snapshot (JSON)"),
    previous: Path | None = typer.Option(
        None, exists=True, dir_okay=False, help="Previous snapshot of the same host (JSON)",
    ),
    dry_run: bool = typer.Option(False, help="Collect alerts instead of submitting them"),
):
    """Reconcile a snapshot against its predecessor and print the alerts."""
    from oralicense_engine.alerts.client import CollectingAlertEmitter
    from oralicense_engine.common.config import get_settings
    from oralicense_engine.common.logging import setup_logging
    from oralicense_engine.deps import (
        get_alert_service_client,
        get_api_service_client,
        reset_singletons,
    )
    from oralicense_engine.reconciliation.engine import Reconciler

    settings = get_settings()
    setup_logging(settings.log_level)

    current_snapshot = _load_snapshot(current)
    previous_snapshot = _load_snapshot(previous) if previous else None
    if previous_snapshot and previous_snapshot.hostname != current_snapshot.hostname:
        console.print("[bold red]Error:[/bold red] snapshots belong to different hosts")
        raise typer.Exit(1)

    try:
        api_client = get_api_service_client()
        emitter = CollectingAlertEmitter() if dry_run else get_alert_service_client()
        reconciler = Reconciler.from_settings(settings, api_client, api_client, emitter)
        report = reconciler.reconcile(previous_snapshot, current_snapshot)
    finally:
        reset_singletons()

    table = Table(title=f"Alerts for {report.hostname}")
    table.add_column("Code")
    table.add_column("Severity")
    table.add_column("Description")
    for alert in report.alerts:
        table.add_row(alert.alert_code.value, alert.alert_severity.value, alert.description)
    console.print(table)

    for db in current_snapshot.databases:
        licenses = ", ".join(f"{lic.name}={lic.count:g}" for lic in db.licenses if lic.count > 0)
        console.print(f"  {db.name}: {licenses or '-'}")

    if report.degraded_checks:
        console.print(f"[yellow]Degraded checks:[/yellow] {', '.join(report.degraded_checks)}")
    if report.failed_alerts:
        console.print(f"[bold red]{len(report.failed_alerts)} alert(s) not submitted[/bold red]")
        raise typer.Exit(1)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check OraLicense-Engine server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        color = "green" if data["status"] == "ok" else "yellow"
        console.print(
            f"[bold {color}]{data['status']}[/bold {color}] v{data['version']} "
            f"({data['environment']}, database {data['database']})"
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
