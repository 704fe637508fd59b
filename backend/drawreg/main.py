import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from drawreg.core.audit.service import AuditMiddleware
from drawreg.core.comments.router import router as comments_router
from drawreg.core.drawings.router import router as drawings_router
from drawreg.core.errors import DrawingRegisterError
from drawreg.core.logging import configure_logging
from drawreg.core.transmittals.router import router as transmittals_router
from drawreg.db.models import create_all
from drawreg.db.session import build_engine, build_session_factory
from drawreg.settings import Settings, get_settings

logger = logging.getLogger(__name__)


async def drawing_register_error_handler(request: Request, exc: DrawingRegisterError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail, exc_info=exc.__cause__)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.code},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings.DATABASE_URL, settings)
        if settings.DB_CREATE_ALL:
            await create_all(engine)
        app.state.session_factory = build_session_factory(engine)
        logger.info("Drawing register started (%s)", settings.APP_ENV)
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(
        title="Drawing Register API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_DEBUG else None,
        redoc_url="/redoc" if settings.APP_DEBUG else None,
        lifespan=lifespan,
    )

    app.add_middleware(AuditMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_DEBUG else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DrawingRegisterError, drawing_register_error_handler)

    app.include_router(drawings_router)
    app.include_router(transmittals_router)
    app.include_router(comments_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
