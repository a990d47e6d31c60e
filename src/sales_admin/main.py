import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from tortoise import Tortoise
from tortoise.contrib.fastapi import tortoise_exception_handlers

from .core.config import TORTOISE_ORM_CONFIG
from .core.exceptions import SalesAdminError
from .core.logging_config import configure_logging
from .features.inventory.router import router as inventory_router
from .features.sales.router import router as sales_router

configure_logging()
logger = logging.getLogger("sales_admin.main")  # This logger will inherit from 'sales_admin'


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Connects Tortoise-ORM on startup and closes its connections on shutdown.
    """
    logger.info("Starting application...")
    await Tortoise.init(config=TORTOISE_ORM_CONFIG)
    logger.info("Tortoise-ORM has been initialized.")

    yield

    await Tortoise.close_connections()
    logger.info("Tortoise-ORM connections have been closed.")


async def sales_admin_error_handler(request: Request, exc: SalesAdminError) -> JSONResponse:
    """Maps domain errors to their HTTP status with a {"detail": ...} body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app = FastAPI(
    title="Sales Admin API",
    description="API for managing products, categories, stock and sales, with revenue reports.",
    version="0.1.0",
    exception_handlers={
        **tortoise_exception_handlers(),
        SalesAdminError: sales_admin_error_handler,
    },
    lifespan=lifespan,
)


@app.get("/")
async def read_root(request: Request):
    """
    Root endpoint for the API.
    """
    client_host = request.client.host if request.client else "unknown client"
    logger.info(f"Root endpoint '/' accessed by {client_host}")
    return {"message": "Sales Admin API is running!"}


app.include_router(inventory_router, prefix="/api/v1")
app.include_router(sales_router, prefix="/api/v1")
