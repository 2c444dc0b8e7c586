"""
Advisor Back Office - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from backoffice import __version__
from backoffice.config import settings
from backoffice.api.v1.router import api_router
from backoffice.utils.exceptions import BackofficeException
from backoffice.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events handler."""
    setup_logging()
    logger.info(f"🚀 Starting {settings.APP_NAME} ({settings.APP_ENV})...")

    yield

    logger.info(f"🛑 Shutting down {settings.APP_NAME}...")


async def backoffice_exception_handler(request: Request, exc: BackofficeException):
    """Return domain errors as 400 responses."""
    logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content=exc.to_dict())


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Risk limit validation and trading alert triage for advisor accounts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BackofficeException, backoffice_exception_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": __version__
        }

    return app


# Create the application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backoffice.main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
