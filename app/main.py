"""
Plants API - Main application entry point.

Catalog backend for users, plants, categories and favorites.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.database import Database
from app.core.middleware import MaxBodySizeMiddleware
from app.users.views import router as users_router
from app.plants.views import router as plants_router
from app.categories.views import router as categories_router
from app.favorites.views import router as favorites_router

settings = get_settings()
API_PREFIX = "/api"

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await Database.connect()
    yield
    # Shutdown
    await Database.disconnect()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## Plants API

Catalog backend for plants, their categories, users and favorites.

### List endpoints

Every list endpoint accepts the same query parameters:

- `page`, `limit`: pagination
- `sort`: allow-listed field, prefix `-` for descending
- `search`: case-insensitive text search
- `startDate`, `endDate`: creation date range (ISO-8601)
- `<field>=value`, `<field>_gte=value`, ...: allow-listed filters

    """,
    lifespan=lifespan,
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MaxBodySizeMiddleware)


# ==================== Error envelope ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(PyMongoError)
async def database_exception_handler(request: Request, exc: PyMongoError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Database error"},
    )


# Include routers
routers = [
    users_router,
    plants_router,
    categories_router,
    favorites_router,
]

for router in routers:
    app.include_router(router, prefix=API_PREFIX)


@app.get(API_PREFIX, tags=["Health"])
async def api_index():
    """API overview with the available resource endpoints."""
    return {
        "success": True,
        "message": f"Welcome to the {settings.APP_NAME}",
        "project": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "endpoints": {
            "users": f"{API_PREFIX}/users",
            "plants": f"{API_PREFIX}/plants",
            "categories": f"{API_PREFIX}/categories",
            "favorites": f"{API_PREFIX}/favorites",
        },
    }


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if Database.client else "disconnected",
        "version": settings.APP_VERSION,
    }
