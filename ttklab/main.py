"""TTK Lab - FastAPI Backend.

Stochastic time-to-kill estimates for shooter weapons.
"""

import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api import api_router
from .api.deps import default_config
from .services.ttk_analysis import ResultsCache
from .services.weapon_catalog import WeaponCatalog

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = f"/api/{settings.api_version}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the weapon catalog and an empty results cache for the app's lifetime."""
    logger.info(f"Starting {settings.app_name} (catalog: {settings.catalog_path})")

    app.state.catalog = WeaponCatalog.load(settings.catalog_path)
    app.state.results_cache = ResultsCache(
        default_config(),
        hp=settings.hp,
        target_radius=settings.target_radius,
        max_entries=settings.results_cache_size,
    )

    yield

    logger.info(f"Stopping {settings.app_name}; dropping {len(app.state.results_cache)} cached results")
    app.state.results_cache.clear()


app = FastAPI(
    title=settings.app_name,
    description="""
    TTK Lab API - stochastic weapon time-to-kill estimates.

    - Theoretical and expected time-to-kill per weapon and distance
    - Kill probability and AUC within a time window
    - Recoil drift and player-skill aware hit simulation
    - Weapon damage and TTK comparison tables
    """,
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

origins = list(settings.cors_origins)
if os.environ.get("FRONTEND_URL"):
    origins.append(os.environ["FRONTEND_URL"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """Service info and entry points."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "weapons": f"{API_PREFIX}/weapons/",
        "evaluate": f"{API_PREFIX}/ttk/evaluate",
    }


@app.get("/health")
async def health_check(request: Request):
    """Healthy once the catalog is loaded."""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        return {"status": "starting", "weapons": 0}
    return {"status": "healthy", "weapons": len(catalog)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ttklab.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        reload=settings.debug,
    )
