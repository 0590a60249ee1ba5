"""
Product API: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app), or by
       the `product-api` console script (app.main:run).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐         │
    │  │  Req ID  │→│ Logging │→│ GZip │→│ CORS │         │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘         │
    │                                                     │
    │  Routes:                                            │
    │  ┌─────────────────────────┐ ┌─────────────┐        │
    │  │ /products, /products/id │ │ GET /health │        │
    │  └─────────────────────────┘ └─────────────┘        │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB/Id→500    │   │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  Docs: /api-docs (Swagger UI), /redoc, /openapi.json│
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → connect to MongoDB → build ProductStore
    Shutdown: close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import close_mongo_connection, connect_to_mongo, get_products_collection
from app.exceptions import (
    DatabaseError,
    InvalidIdError,
    NotFoundError,
    ProductAPIError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, products
from app.services.product_store import ProductStore

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."
UNEXPECTED_ERROR_MESSAGE = "Something went wrong!"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the process-wide MongoDB client.

    The client is created here (never at import time) and the store built on
    it is published on app.state for the get_product_store dependency.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Product API starting up...")

    client = await connect_to_mongo()
    app.state.mongo_client = client
    app.state.product_store = ProductStore(get_products_collection(client))

    logger.info("API docs: http://localhost:%d/api-docs", settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Product API shutting down...")
    close_mongo_connection(client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and {"message": ...} bodies.

    Handler hierarchy:
        ValidationError          → 400 (message names the failing fields)
        RequestValidationError   → 400 (FastAPI-level parse failures)
        NotFoundError            → 404 "Product not found"
        InvalidIdError           → 500 generic message
        DatabaseError            → 500 generic message
        ProductAPIError (base)   → 500 generic message
        Exception (fallback)     → 500 generic message, traceback logged

    500 responses never include driver errors or stack traces; those go to
    the server log together with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return _message(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        logger.warning("[%s] Request validation error: %s", rid, details)
        return _message(400, details or "Invalid request")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _message(404, exc.message)

    @app.exception_handler(InvalidIdError)
    async def handle_invalid_id(request: Request, exc: InvalidIdError):
        rid = request_id_var.get("")
        logger.error("[%s] Invalid id: %s", rid, exc.message)
        return _message(500, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _message(500, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(ProductAPIError)
    async def handle_app_error(request: Request, exc: ProductAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _message(500, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return _message(500, UNEXPECTED_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance. No database connection is
    opened until the lifespan runs.
    """
    app = FastAPI(
        title="CRUD API Documentation",
        description=(
            "Documentation for the CRUD API created using FastAPI and MongoDB."
        ),
        version=__version__,
        docs_url="/api-docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        servers=[
            {"url": f"http://localhost:{settings.port}", "description": "Local server"},
        ],
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(products.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console-script entry point: serve `app` on settings.host:settings.port."""
    setup_logging()
    logger.info("Server started on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
