"""GET /health — checks the package and cache directories."""

import logging
import os

from fastapi import APIRouter, Request

from wpup.api.schemas import HealthResponse
from wpup.version import __version__

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    """Report whether packages can be read and metadata can be cached."""
    cfg = request.app.state.config
    services: dict[str, bool] = {"packages": False, "cache": True}

    packages = None
    if cfg.packages_dir.is_dir() and os.access(cfg.packages_dir, os.R_OK):
        services["packages"] = True
        packages = len(list(cfg.packages_dir.glob("*.zip")))
    else:
        logger.warning(f"[health] Package directory not readable: {cfg.packages_dir}")

    if cfg.cache_enabled:
        # Created on first write, so a writable parent is enough.
        target = cfg.cache_dir if cfg.cache_dir.exists() else cfg.cache_dir.parent
        services["cache"] = target.is_dir() and os.access(target, os.W_OK)
        if not services["cache"]:
            logger.warning(f"[health] Cache directory not writable: {cfg.cache_dir}")

    overall = "ok" if all(services.values()) else "degraded"
    return HealthResponse(status=overall, version=__version__, services=services, packages=packages)
