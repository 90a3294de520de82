"""Search mode: medicine search, nearby pharmacies and trending medicines from the terminal."""

from typing import Optional

import typer

from src.errors import MedAssistError
from src.models.search import NearbyQuery, SearchQuery

from .shared import (
    console,
    get_engine,
    logger,
    print_pharmacies,
    print_search_response,
    print_trending,
    write_json_result,
)


def _fail(e: MedAssistError, log) -> None:
    console.print(f"[red]{e.message}[/red]")
    log.error("cli.command.failed", status=e.status_code, error=e.message)
    raise typer.Exit(1) from e


def search(
    term: str = typer.Argument(..., help="Medicine name, generic name, brand or active ingredient"),
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude of the search origin"),
    lon: Optional[float] = typer.Option(None, "--lon", help="Longitude of the search origin"),
    radius: Optional[int] = typer.Option(None, "--radius", "-r", help="Radius in meters (default 20000)"),
    category: Optional[str] = typer.Option(None, "--category", help="Dosage form, e.g. tablet"),
    therapeutic_class: Optional[str] = typer.Option(None, "--class", help="Therapeutic class, e.g. diabetes"),
    requires_prescription: Optional[str] = typer.Option(None, "--rx", help="true/false"),
    min_price: Optional[int] = typer.Option(None, "--min-price"),
    max_price: Optional[int] = typer.Option(None, "--max-price"),
    page: int = typer.Option(1, "--page"),
    limit: int = typer.Option(20, "--limit"),
    json_out: bool = typer.Option(False, "--json", help="Also write the response to output/last_result.json"),
) -> None:
    """Search medicines and show offers grouped per medicine."""
    log = logger.bind(command="search", term=term)
    try:
        query = SearchQuery.from_params(
            search=term,
            latitude=lat,
            longitude=lon,
            radius=radius,
            category=category,
            therapeutic_class=therapeutic_class,
            requires_prescription=requires_prescription,
            min_price=min_price,
            max_price=max_price,
            page=page,
            limit=limit,
        )
        response = get_engine().search_medicines(query)
    except MedAssistError as e:
        _fail(e, log)
    print_search_response(response)
    if json_out:
        path = write_json_result(response.model_dump(by_alias=True, mode="json"))
        console.print(f"[dim]Wrote {path}[/dim]")


def nearby(
    lat: float = typer.Option(..., "--lat", help="Latitude"),
    lon: float = typer.Option(..., "--lon", help="Longitude"),
    radius: Optional[int] = typer.Option(None, "--radius", "-r", help="Radius in meters (default 10000)"),
    specialty: Optional[str] = typer.Option(None, "--specialty"),
    only_24_hours: bool = typer.Option(False, "--24h", help="Only 24-hour pharmacies"),
    services: Optional[str] = typer.Option(None, "--services", help="Comma-separated, any-of"),
    page: int = typer.Option(1, "--page"),
    limit: int = typer.Option(20, "--limit"),
) -> None:
    """List eligible pharmacies around a point, nearest first."""
    log = logger.bind(command="nearby", lat=lat, lon=lon)
    try:
        query = NearbyQuery.from_params(
            latitude=lat,
            longitude=lon,
            radius=radius,
            specialty=specialty,
            is_24_hours=only_24_hours or None,
            services=services,
            page=page,
            limit=limit,
        )
        response = get_engine().nearby(query)
    except MedAssistError as e:
        _fail(e, log)
    if not response.pharmacies:
        console.print("[yellow]No pharmacies found in range[/yellow]")
        return
    print_pharmacies(response.pharmacies)


def trending() -> None:
    """Show the most widely stocked medicines."""
    log = logger.bind(command="trending")
    try:
        items = get_engine().trending()
    except MedAssistError as e:
        _fail(e, log)
    print_trending(items)
