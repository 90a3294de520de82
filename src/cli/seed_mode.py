"""Seed mode: create tables and load the CSV demo data."""

import typer
from sqlalchemy import func, select

from src.config import DATABASE_URL
from src.db import get_session, init_db, reset_db
from src.db.models import Medicine, Offer, Pharmacy
from src.db.seed_data import seed_demo_data

from .shared import console, logger


def seed(
    reset: bool = typer.Option(False, "--reset", help="Drop all tables first (deletes subscriptions too)"),
) -> None:
    """Load data/medicines.csv, data/pharmacies.csv and data/inventory.csv into the database."""
    log = logger.bind(command="seed", reset=reset)
    log.info("seed.start", database_url=DATABASE_URL.split("@")[-1])
    if reset:
        reset_db()
    else:
        init_db(seed=False)

    with get_session() as session:
        if session.scalar(select(func.count(Medicine.id))):
            console.print("[yellow]Catalog already has data; use --reset to reload it.[/yellow]")
            log.info("seed.skipped_not_empty")
            return
        seed_demo_data(session)

    with get_session() as session:
        counts = {
            "medicines": session.scalar(select(func.count(Medicine.id))),
            "pharmacies": session.scalar(select(func.count(Pharmacy.id))),
            "offers": session.scalar(select(func.count(Offer.id))),
        }
    console.print(
        f"[green]Seeded {counts['medicines']} medicines, {counts['pharmacies']} pharmacies, "
        f"{counts['offers']} offers.[/green]"
    )
    log.info("seed.ok", **counts)
