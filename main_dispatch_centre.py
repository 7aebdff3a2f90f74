"""Mini README: Entry point CLI for the Dispatchdrone planning service.

This script exposes a Typer CLI with two commands: ``run`` starts the
FastAPI application under uvicorn, and ``plan`` plans a JSON file of
dispatches against the configured upstream service and prints the route
report (or GeoJSON with ``--geojson``). Settings come from ``DISPATCHDRONE_*``
environment variables when available.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn
from pydantic import TypeAdapter, ValidationError

from dispatchdrone.configuration import get_settings
from dispatchdrone.logging_utils import configure_root_logger
from dispatchdrone.scheduling import FleetRouteScheduler, MixedDateError
from dispatchdrone.upstream import IlpDataSource
from dispatchdrone.upstream.schemas import DispatchSchema
from dispatchdrone.utils.geojson import plan_to_geojson

cli = typer.Typer(help="Launch the Dispatchdrone planning service or plan a batch offline.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 is a bind address, not something a browser can open.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Dispatchdrone on "
        f"{effective_host}:{effective_port} using upstream {settings.ilp_endpoint}.\n"
        "API docs at "
        f"http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "dispatchdrone.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def plan(
    dispatch_file: Path = typer.Argument(..., exists=True, readable=True, help="JSON list of dispatches."),
    geojson: bool = typer.Option(False, help="Print the first route as a GeoJSON LineString."),
) -> None:
    """Plan a batch of dispatches and print the result as JSON."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        payload = json.loads(dispatch_file.read_text())
        dispatches = TypeAdapter(list[DispatchSchema]).validate_python(payload)
    except (json.JSONDecodeError, ValidationError) as error:
        typer.echo(f"Invalid dispatch file: {error}", err=True)
        raise typer.Exit(code=2) from error

    source = IlpDataSource(settings.ilp_endpoint, timeout=settings.request_timeout_seconds)
    scheduler = FleetRouteScheduler(
        source,
        greedy_max_iterations=settings.greedy_max_iterations,
        astar_max_iterations=settings.astar_max_iterations,
    )
    try:
        result = scheduler.plan([dispatch.to_domain() for dispatch in dispatches])
    except MixedDateError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error

    output = plan_to_geojson(result) if geojson else result.as_dict()
    typer.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    cli()
