"""Shared CLI helpers: console, logger, engine construction, result formatting."""

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from src.config import OUTPUT_DIR
from src.models.catalog import MedicineView, TrendingItem
from src.models.pharmacy import PharmacyView
from src.models.search import SearchResponse
from src.search.engine import SearchEngine
from src.utils.logger import get_logger

console = Console()
logger = get_logger("medassist.cli")


def get_engine() -> SearchEngine:
    return SearchEngine()


def write_json_result(result: dict[str, Any], path: Path | None = None) -> Path:
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    path = path or OUTPUT_DIR / "last_result.json"
    with path.open("w", encoding="utf-8") as f:
        json.dump(result, f, indent=2, default=str, ensure_ascii=False)
    logger.info("results.write_json", path=str(path))
    return path


def medicine_label(medicine: MedicineView) -> str:
    parts = [medicine.name]
    if medicine.strength:
        parts.append(medicine.strength)
    if medicine.brand:
        parts.append(f"({medicine.brand})")
    return " ".join(parts)


def format_distance(meters: float | None) -> str:
    if meters is None:
        return "-"
    if meters < 1000:
        return f"{meters:.0f} m"
    return f"{meters / 1000:.1f} km"


def open_label(is_open: bool | None) -> str:
    if is_open is None:
        return "?"
    return "[green]open[/green]" if is_open else "[red]closed[/red]"


def print_search_response(response: SearchResponse) -> None:
    """One table per medicine group, offers in ranked order."""
    if not response.results:
        console.print(f"[yellow]{response.message or 'No results'}[/yellow]")
        return
    for group in response.results:
        table = Table(title=medicine_label(group.medicine), title_justify="left")
        table.add_column("Pharmacy", style="cyan")
        table.add_column("Price", justify="right", style="green")
        table.add_column("Discount", justify="right")
        table.add_column("Qty", justify="right")
        table.add_column("Status")
        table.add_column("Distance", justify="right")
        table.add_column("Now")
        for offer in group.availability:
            table.add_row(
                offer.pharmacy.name,
                f"{offer.price:.2f}",
                f"{offer.discount_price:.2f}" if offer.discount_price is not None else "-",
                str(offer.quantity),
                offer.status.value,
                format_distance(offer.distance),
                open_label(offer.pharmacy.is_currently_open),
            )
        console.print(table)
    console.print(
        f"[dim]Page {response.current_page}/{max(response.pages, 1)}: "
        f"{response.count} of {response.total} medicines[/dim]"
    )


def print_pharmacies(pharmacies: list[PharmacyView]) -> None:
    table = Table(title="Nearby pharmacies")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Town")
    table.add_column("Distance", justify="right")
    table.add_column("Rating", justify="right")
    table.add_column("24h", justify="center")
    table.add_column("Now")
    for p in pharmacies:
        table.add_row(
            str(p.id),
            p.name,
            p.town,
            format_distance(p.distance),
            f"{p.rating:.1f}",
            "yes" if p.is_24_hours else "no",
            open_label(p.is_currently_open),
        )
    console.print(table)


def print_trending(items: list[TrendingItem]) -> None:
    table = Table(title="Trending medicines")
    table.add_column("#", justify="right")
    table.add_column("Medicine", style="cyan")
    table.add_column("Pharmacies", justify="right")
    table.add_column("Total qty", justify="right")
    table.add_column("Avg price", justify="right", style="green")
    for rank, item in enumerate(items, start=1):
        table.add_row(
            str(rank),
            medicine_label(item.medicine),
            str(item.pharmacy_count),
            str(item.total_quantity),
            f"{item.avg_price:.2f}",
        )
    console.print(table)
