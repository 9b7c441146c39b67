import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from marketplace.api.admin import router as admin_router
from marketplace.api.dashboard import router as dashboard_router
from marketplace.api.listings import catalog_router
from marketplace.api.listings import router as listings_router
from marketplace.api.profiles import router as profiles_router
from marketplace.config import config
from marketplace.database import DatabaseError, initialize_database

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration and initialize the database on startup."""
    config.validate()
    if config.STORE_BACKEND == "sql":
        await initialize_database()
    logger.info(f"Marketplace API started with the {config.STORE_BACKEND} store")
    yield
    logger.info("Shutting down Marketplace API...")


app = FastAPI(
    title=config.API_TITLE,
    version=config.API_VERSION,
    description=config.API_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=config.CORS_ALLOW_CREDENTIALS,
    allow_methods=config.CORS_ALLOW_METHODS,
    allow_headers=config.CORS_ALLOW_HEADERS,
)


@app.exception_handler(DatabaseError)
async def database_exception_handler(request: Request, exc: DatabaseError):
    logger.error(f"Database error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(listings_router)
app.include_router(catalog_router)
app.include_router(profiles_router)
app.include_router(dashboard_router)
app.include_router(admin_router)

if config.MEDIA_BASE_URL.startswith("/"):
    app.mount(
        config.MEDIA_BASE_URL,
        StaticFiles(directory=config.MEDIA_ROOT, check_dir=False),
        name="media",
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": config.API_VERSION}
