from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from linkshelf.core.config import settings
from linkshelf.core.database import Database
from linkshelf.core.errors import LinkShelfError
from linkshelf.models import link, user  # noqa: F401 (tables pour create_all)
from linkshelf.routers import health, auth, links

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def error_body(message: str) -> dict:
    # "detail" pour FastAPI, "error" pour le front existant
    return {"detail": message, "error": message}


def register_error_handlers(app: FastAPI):
    @app.exception_handler(LinkShelfError)
    async def linkshelf_error_handler(request: Request, exc: LinkShelfError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        # rien d'interne ne fuit vers le client
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error")
        )


def create_app(database_url: Optional[str] = None) -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    db = Database(database_url or settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.open()
        try:
            yield
        finally:
            db.close()

    app = FastAPI(
        title="LinkShelf API",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routes
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(links.router)
    # mêmes routes sous /api/v1, le chemin qu'utilise le front
    app.include_router(auth.router, prefix=API_PREFIX, include_in_schema=False)
    app.include_router(links.router, prefix=API_PREFIX, include_in_schema=False)

    return app


app = create_app()
