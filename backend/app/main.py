"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import Authenticator
from app.config import Settings, get_settings
from app.db.session import build_engine, build_session_factory
from app.routers import autofill
from app.schemas.common import ErrorResponse
from app.services.errors import AutofillError
from app.services.mapping_store import MappingStore

logger = logging.getLogger(__name__)


def _warm_backend_state(store: MappingStore) -> None:
    """Prime the DB connection at process start."""

    try:
        store.ping()
    except Exception:
        logger.exception("Backend warm-up failed; continuing without startup pre-warm.")


def _error_response(settings: Settings, error: ErrorResponse, status_code: int) -> JSONResponse:
    if not settings.debug:
        error.details = None
    return JSONResponse(status_code=status_code, content=error.model_dump(exclude_none=True))


def create_app(
    settings: Settings | None = None,
    *,
    mapping_store: MappingStore | None = None,
    authenticator: Authenticator | None = None,
) -> FastAPI:
    """Build the API; collaborators not supplied are constructed from settings at startup."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if app.state.mapping_store is None:
            engine = build_engine(settings.database_url)
            app.state.mapping_store = MappingStore(
                build_session_factory(engine),
                native_upsert=settings.native_upsert,
            )
        _warm_backend_state(app.state.mapping_store)
        try:
            yield
        finally:
            if engine is not None:
                engine.dispose()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.mapping_store = mapping_store
    app.state.authenticator = authenticator or Authenticator(settings.jwt_secret, settings.jwt_algorithm)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(AutofillError)
    async def handle_autofill_error(_: Request, exc: AutofillError) -> JSONResponse:
        return _error_response(
            settings,
            ErrorResponse(error=exc.message, code=exc.code, details=exc.details),
            exc.status_code,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("autofill.unhandled_error path=%s", request.url.path)
        return _error_response(
            settings,
            ErrorResponse(error="Server error", code="internal_error", details=repr(exc)),
            500,
        )

    app.include_router(autofill.router, tags=["autofill"])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""

        return {"status": "ok"}

    return app


logging.basicConfig(level=get_settings().log_level)
app = create_app()
