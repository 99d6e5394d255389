"""FastAPI application entry point."""

import logging
import os

# Configure logging based on ENV environment variable
# ENV=dev: INFO level with detailed format (default)
# ENV=prod/staging: WARNING level, minimal logs
_env = os.getenv("ENV", "dev").lower()
_is_dev = _env == "dev"
_log_level = logging.INFO if _is_dev else logging.WARNING

logging.basicConfig(
    level=_log_level,
    format=(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        if _is_dev
        else "%(levelname)s | %(message)s"
    ),
    datefmt="%H:%M:%S",
)

# Enable request/exception loggers in dev mode only
if _is_dev:
    logging.getLogger("app.request").setLevel(logging.INFO)
    logging.getLogger("app.exception").setLevel(logging.INFO)

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, health, workflow
from app.config import settings
from app.middleware.exception_handlers import (
    general_exception_handler,
    github_configuration_exception_handler,
    github_remote_api_exception_handler,
    github_transport_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.middleware.request_logging import RequestLoggingMiddleware
from app.services.github.exceptions import (
    GithubConfigurationError,
    GithubRemoteApiError,
    GithubTransportError,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Workflow Job Dashboard API",
    description="API for browsing GitHub Actions build jobs of a workflow",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Trace middleware for request logging and correlation
app.add_middleware(RequestLoggingMiddleware)

# Register global exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(GithubRemoteApiError, github_remote_api_exception_handler)
app.add_exception_handler(GithubTransportError, github_transport_exception_handler)
app.add_exception_handler(GithubConfigurationError, github_configuration_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(workflow.router, prefix="/api/workflow", tags=["Workflow"])
app.include_router(auth.router, prefix="/api", tags=["Auth"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Workflow Job Dashboard API",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


@app.on_event("startup")
async def startup_event():
    """Application startup tasks."""
    logger.info(
        "Serving jobs of %s/%s workflow %s",
        settings.GITHUB_REPO_OWNER,
        settings.GITHUB_REPO_NAME,
        settings.GITHUB_WORKFLOW_FILE,
    )
    if not settings.GITHUB_TOKEN:
        logger.warning(
            "GITHUB_TOKEN not set. Requests without a token header run unauthenticated."
        )
