"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campaignforge import __version__
from campaignforge.api.routes import api_router
from campaignforge.config import settings
from campaignforge.database import init_db
from campaignforge.services.picklist_cache import PicklistCache
from campaignforge.services.picklists import fetch_picklists


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    await init_db()

    app.state.picklist_cache = PicklistCache(fetch_picklists, settings.picklist_cache_ttl)

    yield

    app.state.picklist_cache.invalidate()


app = FastAPI(
    title="Campaign Forge",
    description="Item forge, monster builder and rules text engine for tabletop RPG campaigns",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


@app.middleware("http")
async def add_security_headers(request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    return response


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Campaign Forge",
        "version": __version__,
        "docs": "/api/docs",
    }
