import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.api.goals import router as goals_router
from tracker.api.metrics import router as metrics_router
from tracker.api.values import router as values_router
from tracker.api.views import router as views_router
from tracker.core.config import Settings
from tracker.core.errors import TrackerError
from tracker.core.logging import setup_logger
from tracker.db import Database
from tracker.models.goal import Goal  # noqa: F401  (import ensures table is registered)
from tracker.models.metric import Metric  # noqa: F401
from tracker.models.metric_value import MetricValue  # noqa: F401

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        msg = msg.removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": _validation_message(exc),
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(TrackerError)
    async def tracker_error(request: Request, exc: TrackerError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Database error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logger("tracker", settings.log_level)

    app = FastAPI(title="Metric Tracker", version="0.1.0")
    app.state.settings = settings
    app.state.database = Database(settings.database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.create_tables:
        # Create DB tables on startup (alembic manages them otherwise)
        app.state.database.create_all()

    register_error_handlers(app)

    app.include_router(metrics_router)
    app.include_router(values_router)
    app.include_router(goals_router)
    app.include_router(views_router)

    @app.get("/")
    def root():
        return {"message": "Metric tracker backend is running"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    url = app.state.database.engine.url.render_as_string(hide_password=True)
    logger.info("Metric tracker ready (database: %s)", url)
    return app

