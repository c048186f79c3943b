"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from planner.config import get_settings
from planner.db.database import init_db

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events.

    Args:
        app: FastAPI application instance.
    """
    # Startup
    init_db()
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    # Shutdown (cleanup if needed)


app = FastAPI(
    title=settings.app_name,
    description="Practice planner for coaches: drill library, categories and spreadsheet import",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Import and include routers
from planner.auth.router import router as auth_router  # noqa: E402
from planner.categories.router import router as categories_router  # noqa: E402
from planner.drills.router import router as drills_router  # noqa: E402
from planner.imports.router import router as imports_router  # noqa: E402

# API routes
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
# Registered before the drills router so /api/drills/import isn't taken for a drill ID
app.include_router(imports_router, prefix="/api/drills/import", tags=["imports"])
app.include_router(drills_router, prefix="/api/drills", tags=["drills"])


@app.get("/health")
async def health_check():
    """Health check endpoint for Docker/Kubernetes.

    Returns:
        dict: Health status.
    """
    return {"status": "healthy", "app": settings.app_name}
