"""
Main FastAPI application entry point.
Configures and initializes the PharmaTrack local API.
"""
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from pharmatrack.core import config
from pharmatrack.core.dependencies import get_inventory_store
from pharmatrack.core.exception_handler import register_exception_handlers
from pharmatrack.core.logging import configure_logging, get_logger
from pharmatrack.api.routes import health_routes, drug_routes
from pharmatrack.services.inventory_store import InventoryStore

logger = get_logger(__name__)


def create_app(inventory_store: Optional[InventoryStore] = None) -> FastAPI:
    """Build the application around an inventory store (configured one by default)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = inventory_store or get_inventory_store()
        app.state.inventory_store = store
        await store.initialize()
        yield
        await store.flush()

    app = FastAPI(
        title=config.settings.api_title,
        version=config.settings.api_version,
        description="Local-first drug inventory tracker for a single clinic",
        lifespan=lifespan
    )

    # Register exception handlers
    register_exception_handlers(app)

    # Register routes
    app.include_router(health_routes.router)
    app.include_router(drug_routes.router)

    # Middleware to log request paths
    @app.middleware("http")
    async def log_request(request: Request, call_next):
        logger.info("request", method=request.method, path=request.url.path)
        response = await call_next(request)
        return response

    return app


configure_logging()
app = create_app()


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
