"""Utility modules."""

from src.utils.csv_loader import load_inventory, load_medicines, load_pharmacies
from src.utils.logger import bind_context, clear_context, get_logger, log_search_stage, request_log_context
from src.utils.tracing import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "load_medicines",
    "load_pharmacies",
    "load_inventory",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_search_stage",
    "request_log_context",
    "get_tracer",
    "init_tracing",
    "shutdown_tracing",
]
