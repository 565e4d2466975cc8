"""Bookstore API — FastAPI entry point.

Registers middleware, the pages of the bookstore, the generic API portal
endpoint and the error translation of portal and model errors. Every API
call is a POST to ``{api_url}{model-uri}/{method}``.
"""

import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from api.middleware import UserMiddleware, get_current_user
from core.business.errors import (
    AuthorizationError,
    DataAccessError,
    ModelNotFoundError,
    ModelStateError,
    ValidationFailedError,
)
from core.database import Database
from core.engine.template_engine import TemplateEngine
from core.portal import (
    ApiPortal,
    InvalidMethodError,
    InvalidRequestBodyError,
    InvalidTypeError,
    InvalidUrlError,
    ModelRegistry,
    PortalRequest,
)
from patterns.domain_config import AppConfig
from verticals.bookstore.business import FACTORIES
from verticals.bookstore.seed import seed
from verticals.bookstore.users import get_user

logger = logging.getLogger("bookstore.api")

BOOKSTORE_DIR = Path(__file__).resolve().parent.parent / "verticals" / "bookstore"

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

def _error(status_code: int, exc: Exception, **extra) -> JSONResponse:
    content = {"error": type(exc).__name__, "message": str(exc), **extra}
    return JSONResponse(status_code=status_code, content=content)


async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    logger.debug("404 %s %s: %s", request.method, request.url.path, exc)
    return _error(404, exc)


async def _bad_request(request: Request, exc: Exception) -> JSONResponse:
    return _error(400, exc)


async def _forbidden(request: Request, exc: AuthorizationError) -> JSONResponse:
    logger.info("403 %s %s: %s", request.method, request.url.path, exc.message)
    return _error(403, exc, action=exc.action, model=exc.model_name)


async def _invalid(request: Request, exc: ValidationFailedError) -> JSONResponse:
    return _error(422, exc, **exc.to_dict())


async def _conflict(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("409 %s %s: %s", request.method, request.url.path, exc)
    return _error(409, exc)


async def _internal(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("500 %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "InternalError", "message": "Internal server error"})


def _register_error_handlers(app: FastAPI) -> None:
    for exc_class in (InvalidUrlError, InvalidTypeError, InvalidMethodError, ModelNotFoundError):
        app.add_exception_handler(exc_class, _not_found)
    app.add_exception_handler(InvalidRequestBodyError, _bad_request)
    app.add_exception_handler(AuthorizationError, _forbidden)
    app.add_exception_handler(ValidationFailedError, _invalid)
    app.add_exception_handler(DataAccessError, _conflict)
    app.add_exception_handler(ModelStateError, _conflict)
    app.add_exception_handler(Exception, _internal)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the application for ``config`` (defaults: environment + demo user)."""
    config = config or AppConfig.from_env(user_reader=get_user)
    views_dir = config.views_dir or BOOKSTORE_DIR / "views"
    static_dir = config.static_dir or BOOKSTORE_DIR / "public"

    # Registration errors abort here, before the server accepts requests.
    registry = ModelRegistry.from_factories(FACTORIES)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup/shutdown hooks."""
        database = Database(config.database_url, echo=config.echo_sql)
        await database.create_all()
        if config.seed_data:
            async with database.session() as session:
                await seed(session)

        app.state.database = database
        app.state.portal = ApiPortal(config, registry, database)
        logger.info("Bookstore API started with %d models", len(registry))
        yield
        await database.dispose()
        logger.info("Bookstore API shutting down")

    app = FastAPI(
        title="Bookstore",
        description="Business-object demo: generic API portal over the bookstore models",
        version=VERSION,
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry
    app.state.templates = TemplateEngine(views_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(UserMiddleware, user_reader=config.user_reader)

    _register_error_handlers(app)

    # -- Static files and pages --

    app.mount("/public", StaticFiles(directory=static_dir), name="public")

    from verticals.bookstore.router import router as bookstore_router

    app.include_router(bookstore_router, tags=["Bookstore"])

    # -- API portal --

    @app.post(config.api_url + "{path:path}", tags=["API portal"])
    async def api_portal(request: Request, path: str):
        """Forward the request to the model named by the URL."""
        raw = await request.body()
        try:
            body = json.loads(raw) if raw else None
        except json.JSONDecodeError as exc:
            raise InvalidRequestBodyError(path, f"malformed JSON ({exc.msg})") from exc

        portal: ApiPortal = request.app.state.portal
        result = await portal.process(
            PortalRequest(url=request.url.path, body=body, user=get_current_user())
        )
        return JSONResponse(content=result)

    # -- Health --

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION, "models": registry.uris}

    return app


app = create_app()
