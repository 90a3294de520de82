"""Validate the subscription plan table and print a summary."""

from rich.table import Table

from src.subscriptions.plans import load_plan_catalog

from .shared import console, logger


def validate_plans() -> None:
    """Load config/plans.yaml (or PLANS_CONFIG_PATH), validate every plan, print summary table."""
    log = logger.bind(command="validate-plans")
    log.info("validate_plans.start")

    try:
        catalog = load_plan_catalog()
    except ValueError as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("validate_plans.fail", error=str(e))
        raise SystemExit(1) from e

    table = Table(title="Subscription plans")
    table.add_column("Plan ID", style="cyan")
    table.add_column("Name")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Days", justify="right")
    table.add_column("Features", justify="right")
    table.add_column("Telemedicine", justify="center")

    for plan in catalog:
        table.add_row(
            plan.id,
            plan.name,
            f"{plan.price:.0f} {plan.currency}",
            str(plan.duration_days),
            str(len(plan.features)),
            "yes" if plan.limits.can_access_telemedicine else "no",
        )

    console.print(table)
    console.print(f"[green]Plans valid. {len(catalog)} plans.[/green]")
    log.info("validate_plans.ok", plans=len(catalog))
