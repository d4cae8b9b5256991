"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (database schema, Redis).
Middleware, CORS, exception handlers and routers all registered here.

The token service is built once from settings and parked on app.state;
nothing mutates it afterwards.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from devconnect import __version__
from devconnect.api import api_router
from devconnect.auth.jwt import TokenService
from devconnect.config import Settings, settings
from devconnect.errors import INTERNAL_ERROR

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    cfg: Settings = app.state.settings
    logger.info(
        "devconnect.starting",
        version=__version__,
        environment=cfg.environment,
        port=cfg.port,
    )

    from devconnect.db.engine import create_tables, engine
    from devconnect.db.redis_client import close_redis, init_redis

    if cfg.create_tables:
        await create_tables()
        logger.info("devconnect.tables_ready")

    try:
        await init_redis()
        logger.info("devconnect.redis_connected", url=cfg.redis_url)
    except Exception as e:
        # Redis only backs rate limiting; run without it
        logger.warning("devconnect.redis_unavailable", error=str(e))

    yield

    logger.info("devconnect.shutdown")
    await close_redis()
    await engine.dispose()


# ─── Exception handlers ──────────────────────────────────


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report each invalid request field as a 400."""
    errors = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p != "body") or "body",
            "msg": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"errors": errors})


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log store and unexpected failures; reply without any detail."""
    logger.error(
        "devconnect.internal_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=INTERNAL_ERROR.status_code,
        content={"detail": INTERNAL_ERROR.body()},
    )


def create_app(cfg: Settings = settings) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="DevConnect",
        description="Social profile backend for developers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.token_service = TokenService.from_settings(cfg)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from devconnect.middleware.rate_limit import RateLimitMiddleware
    from devconnect.middleware.request_id import RequestIdMiddleware
    from devconnect.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=cfg.rate_limit_rpm,
        auth_rpm=cfg.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, internal_exception_handler)
    app.add_exception_handler(Exception, internal_exception_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: devconnect.main:app)
app = create_app()
