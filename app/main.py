"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_exception_handlers
from app.api.products import router as products_router
from app.config import get_settings
from app.database import engine, Base
from app.logging_config import configure_logging
from app.models import Product  # noqa: F401 - Import to register models

settings = get_settings()

configure_logging(settings)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup and release the pool on shutdown."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"🚀 Product catalog started in {settings.app_env} mode")
    yield
    engine.dispose()
    logger.info("🔌 Database connections closed")


app = FastAPI(
    title="Product Catalog",
    description="Manage a product catalog with filtering, sorting and search",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(products_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "success", "message": "Service is healthy"}
