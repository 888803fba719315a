"""FastAPI application factory for the annotation service."""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from annotate_canvas.logger_config import setup_logger

from .config import Settings, get_settings
from .repository import AnnotationRepository, UserRepository
from .routes import annotations_router, auth_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use, ``get_settings()`` when omitted.

    Returns:
        Configured FastAPI application with empty repositories.
    """
    settings = settings or get_settings()

    app = FastAPI(title="AnnotateCanvas API", debug=settings.debug)
    app.state.settings = settings
    app.state.users = UserRepository()
    app.state.annotations = AnnotationRepository()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Clients read error text from ``msg``.
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = "; ".join(
            f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()
        )
        logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
        return JSONResponse(status_code=400, content={"msg": errors})

    @app.get("/")
    def root() -> str:
        return "AnnotateCanvas API is running"

    app.include_router(auth_router, prefix="/api")
    app.include_router(annotations_router, prefix="/api")
    return app


def run() -> None:
    """Entry point of ``annotate-canvas-server``."""
    settings = get_settings()
    setup_logger(logging.DEBUG if settings.debug else logging.INFO)
    logger.info("Starting annotation service on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
