"""CLI commands: one module per mode (serve, seed, search, validate-plans)."""

from typer import Typer

from src.cli import search_mode, seed_mode, serve_mode, validate_plans as validate_plans_module
from src.utils.tracing import init_tracing

init_tracing()

app = Typer(help="MedAssist medicine availability search")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command()(seed_mode.seed)
    app.command()(search_mode.search)
    app.command()(search_mode.nearby)
    app.command()(search_mode.trending)
    app.command(name="validate-plans")(validate_plans_module.validate_plans)


register_commands()
