"""Plan table loading: YAML file -> immutable PlanCatalog."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from src.config import DEFAULT_CURRENCY, PLANS_CONFIG_PATH
from src.models.subscription import Plan, PlanCatalog
from src.utils.logger import get_logger

logger = get_logger("medassist.subscriptions.plans")


def _plan_entries(raw: Any, path: Path) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValueError(f"Plans config must be a YAML object (dict), got {type(raw).__name__}: {path}")
    plans = raw.get("plans", raw)
    if not isinstance(plans, dict) or not plans:
        raise ValueError(f"Plans config has no plans: {path}")
    return plans


def load_plan_catalog(path: Path | None = None) -> PlanCatalog:
    """Read and validate the plan table once. Raises ValueError naming the file on any problem."""
    path = Path(path or PLANS_CONFIG_PATH)
    if not path.exists():
        raise ValueError(f"Plans config not found: {path}. Set PLANS_CONFIG_PATH or create config/plans.yaml.")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in plans config {path}: {e}") from e

    plans: dict[str, Plan] = {}
    for plan_id, entry in _plan_entries(raw, path).items():
        if not isinstance(entry, dict):
            raise ValueError(f"Plan {plan_id!r} must be a dict in {path}")
        try:
            plans[str(plan_id)] = Plan.model_validate({"currency": DEFAULT_CURRENCY, **entry, "id": str(plan_id)})
        except PydanticValidationError as e:
            raise ValueError(f"Invalid plan {plan_id!r} in {path}: {e}") from e

    logger.info("plans.loaded", path=str(path), plan_count=len(plans))
    return PlanCatalog(plans)
