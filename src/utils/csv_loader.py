"""Load demo catalog, pharmacy and inventory data from CSV files."""

import csv
from pathlib import Path
from typing import Any

from src.config import DATA_DIR


def _read_csv(path: Path) -> list[dict[str, Any]]:
    """Read a CSV file and return list of row dicts."""
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def load_medicines(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load the medicine catalog from medicines.csv."""
    path = csv_path or DATA_DIR / "medicines.csv"
    return _read_csv(path)


def load_pharmacies(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load pharmacies from pharmacies.csv."""
    path = csv_path or DATA_DIR / "pharmacies.csv"
    return _read_csv(path)


def load_inventory(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load offers from inventory.csv (pharmacy license + medicine barcode per row)."""
    path = csv_path or DATA_DIR / "inventory.csv"
    return _read_csv(path)
