"""FastAPI application factory with lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from wpup.config import WpupConfig, config as default_config
from wpup.server.update_server import UpdateServer
from wpup.version import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    # ── Startup ──
    cfg: WpupConfig = app.state.config
    logging.basicConfig(level=cfg.log_level.upper())
    logger.info(f"wpup v{__version__} serving packages from {cfg.packages_dir}")
    if not cfg.packages_dir.is_dir():
        logger.warning(f"Package directory {cfg.packages_dir} does not exist")

    yield

    # ── Shutdown ──
    logger.info("wpup shutting down...")


def create_app(cfg: Optional[WpupConfig] = None, server: Optional[UpdateServer] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        cfg: Settings. Defaults to the module-level config (env vars + .env).
        server: A custom UpdateServer, e.g. a subclass with license checks.
    """
    cfg = cfg or default_config
    app = FastAPI(
        title="wpup",
        description="Self-hosted update API for WordPress plugins and themes.",
        version=__version__,
        lifespan=lifespan,
        debug=cfg.debug,
    )
    app.state.config = cfg
    app.state.update_server = server or UpdateServer(cfg)

    # Banner and icon URLs point at <server_url><dir name>/<file>
    for asset_dir in (cfg.banners_dir, cfg.icons_dir):
        if asset_dir.is_dir():
            app.mount(f"/{asset_dir.name}", StaticFiles(directory=asset_dir), name=asset_dir.name)

    # Routes
    from wpup.api.routes import health, update
    app.include_router(health.router)
    app.include_router(update.router)

    return app


app = create_app()
