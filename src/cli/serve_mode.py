"""Serve mode: run the HTTP API with uvicorn."""

import sys

import typer
import uvicorn

from src.api.server import create_app
from src.config import API_HOST, API_PORT
from src.db import init_db

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the MedAssist API."""
    init_db()
    log = logger.bind(command="serve", port=port)
    log.info("serve.start")
    try:
        app = create_app()
    except ValueError as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("serve.config_error", error=str(e))
        raise typer.Exit(1) from e

    console.print(f"[green]Starting MedAssist API on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /api/medicines, /api/pharmacies, /api/inventory, /api/payments, GET /health[/dim]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
