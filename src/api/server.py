"""FastAPI application: medicine search, pharmacies, inventory and payments."""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.inventory_routes import router as inventory_router
from src.api.medicine_routes import router as medicine_router
from src.api.payment_routes import router as payment_router
from src.api.pharmacy_routes import router as pharmacy_router
from src.db import init_db
from src.errors import MedAssistError
from src.models.subscription import PlanCatalog
from src.search.engine import SearchEngine
from src.search.inventory import InventoryManager
from src.subscriptions.coordinator import SubscriptionCoordinator
from src.subscriptions.gateway import MockPaymentGateway, PaymentGateway
from src.subscriptions.notifier import LogNotifier, Notifier
from src.subscriptions.plans import load_plan_catalog
from src.utils.logger import get_logger, request_log_context
from src.utils.tracing import init_tracing, shutdown_tracing

logger = get_logger("medassist.api.server")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("query", "path", "body", "header"))
    msg = err.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_tracing()
    init_db()
    logger.info("api.startup", plans=len(app.state.plans))
    yield
    shutdown_tracing()


def create_app(
    search_engine: Optional[SearchEngine] = None,
    coordinator: Optional[SubscriptionCoordinator] = None,
    plans: Optional[PlanCatalog] = None,
    gateway: Optional[PaymentGateway] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """
    Create the FastAPI app. Collaborators not passed in are built from config:
    the plan table from PLANS_CONFIG_PATH, the mock payment gateway and the log notifier.
    """
    app = FastAPI(title="MedAssist API", version="0.1.0", lifespan=_lifespan)

    plans = plans if plans is not None else load_plan_catalog()
    app.state.plans = plans
    app.state.search_engine = search_engine or SearchEngine()
    app.state.inventory_manager = InventoryManager()
    app.state.coordinator = coordinator or SubscriptionCoordinator(
        plans=plans,
        gateway=gateway or MockPaymentGateway(),
        notifier=notifier or LogNotifier(),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        with request_log_context(request_id, path=request.url.path):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(MedAssistError)
    async def handle_medassist_error(request: Request, exc: MedAssistError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log("api.request.failed", path=request.url.path, status=exc.status_code, error=exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        logger.warning("api.request.invalid", path=request.url.path, error=message)
        return _error_response(400, message)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(medicine_router)
    app.include_router(pharmacy_router)
    app.include_router(inventory_router)
    app.include_router(payment_router)
    return app
