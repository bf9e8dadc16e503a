"""UpdateServer — answers get_metadata and download requests for packages.

Subclass and override the hook methods (``check_authorization``,
``filter_metadata``, ``filter_log_columns``, ``find_package``) to customize
behaviour, e.g. to require a license key before returning a download URL.
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import parse_qsl, urlencode

from fastapi import HTTPException
from fastapi.responses import FileResponse, JSONResponse, Response

from wpup.cache.base import Cache
from wpup.cache.file_cache import FileCache
from wpup.config import WpupConfig
from wpup.core.package import Package
from wpup.exceptions import ArchiveUnreadable, InvalidPackage
from wpup.server.request import UpdateRequest
from wpup.server.request_log import RequestLog

logger = logging.getLogger(__name__)

_SLUG_FILENAME_UNSAFE = re.compile(r"[^a-z0-9\-_.,+!]", re.IGNORECASE)

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg")


def add_query_arg(args: dict[str, Any], url: str) -> str:
    """Merge *args* into the query string of *url*. ``None``/``False`` values are removed."""
    if "?" in url:
        base, query_string = url.split("?", 1)
        query = dict(parse_qsl(query_string, keep_blank_values=True))
    else:
        base, query = url, {}
    query.update(args)
    query = {key: value for key, value in query.items() if value is not None and value is not False}
    return base + "?" + urlencode(query)


class UpdateServer:
    """Package lookup, request validation and the two API actions.

    Args:
        config: Directories, cache and logging settings.
        cache: Metadata cache. Defaults to a FileCache in ``config.cache_dir``
               when ``config.cache_enabled``; pass one explicitly to override.
    """

    def __init__(self, config: WpupConfig, cache: Optional[Cache] = None):
        self.config = config
        self.package_directory = Path(config.packages_dir)
        self.asset_directories: dict[str, Path] = {
            "banners": Path(config.banners_dir),
            "icons": Path(config.icons_dir),
        }

        if cache is None and config.cache_enabled:
            cache = FileCache(config.cache_dir)
        self.cache = cache

        self.request_log: Optional[RequestLog] = None
        if config.log_requests:
            self.request_log = RequestLog(
                config.logs_dir,
                rotation=config.log_rotation,
                backup_count=config.log_backup_count,
                anonymize_ips=config.anonymize_ips,
            )

    # ─── Request pipeline ─────────────────────────────────────────────────────

    def handle_request(self, request: UpdateRequest, server_url: str) -> Response:
        """Log, load the package, validate, authorize, then run the action."""
        start_time = time.perf_counter()
        server_url = self.config.server_url or server_url

        self.log_request(request)
        self.load_package_for(request)
        self.validate_request(request)
        self.check_authorization(request)
        return self.dispatch(request, server_url, start_time)

    def load_package_for(self, request: UpdateRequest) -> None:
        if not request.slug:
            return
        try:
            request.package = self.find_package(request.slug)
        except InvalidPackage as exc:
            logger.warning("Invalid package for slug '%s': %s", request.slug, exc)
            raise HTTPException(
                status_code=500,
                detail=(
                    f'Package "{request.slug}" exists, but it is not a valid plugin or theme. '
                    "Make sure it has the right format (Zip) and directory structure."
                ),
            )

    def validate_request(self, request: UpdateRequest) -> None:
        """Every request needs an action and a slug that resolves to a package."""
        if request.action == "":
            raise HTTPException(status_code=400, detail="You must specify an action.")
        if request.slug == "":
            raise HTTPException(status_code=400, detail="You must specify a package slug.")
        if request.package is None:
            raise HTTPException(status_code=404, detail="Package not found")

    def check_authorization(self, request: UpdateRequest) -> None:
        """Hook for subclasses, e.g. license checks. Raise HTTPException to deny."""

    def dispatch(self, request: UpdateRequest, server_url: str, start_time: float) -> Response:
        if request.action == "get_metadata":
            return self.action_get_metadata(request, server_url, start_time)
        if request.action == "download":
            return self.action_download(request)
        raise HTTPException(status_code=400, detail=f'Invalid action "{request.action}".')

    # ─── Actions ──────────────────────────────────────────────────────────────

    def action_get_metadata(self, request: UpdateRequest, server_url: str, start_time: float) -> Response:
        """Package metadata as JSON. This is the primary job of the update API."""
        package = request.package
        meta = package.get_metadata()
        meta["download_url"] = self.generate_download_url(package, server_url)
        meta["banners"] = self.get_banners(package, server_url)
        meta["icons"] = self.get_icons(package, server_url)

        meta = self.filter_metadata(meta, request)

        # Debugging aid; update checkers ignore unknown fields.
        meta["request_time_elapsed"] = "%.3f" % (time.perf_counter() - start_time)
        return JSONResponse(meta)

    def action_download(self, request: UpdateRequest) -> Response:
        package = request.package
        headers = {}
        if self.config.download_max_age > 0:
            headers["Cache-Control"] = f"public, max-age={self.config.download_max_age}"
        return FileResponse(
            package.filename,
            media_type="application/zip",
            filename=f"{package.slug}.zip",
            headers=headers,
        )

    def filter_metadata(self, meta: dict[str, Any], request: UpdateRequest) -> dict[str, Any]:
        """Last chance to adjust a metadata response. Unset properties are omitted."""
        return {key: value for key, value in meta.items() if value is not None}

    # ─── Packages ─────────────────────────────────────────────────────────────

    def find_package(self, slug: str) -> Optional[Package]:
        """Load ``<packages_dir>/<slug>.zip``, or ``None`` if there is no such file.

        Raises:
            InvalidPackage: the file exists but is not a plugin or theme.
        """
        safe_slug = _SLUG_FILENAME_UNSAFE.sub("", slug)
        filename = self.package_directory / f"{safe_slug}.zip"
        if not filename.is_file():
            return None
        try:
            return Package.from_archive(
                filename,
                slug,
                cache=self.cache,
                cache_ttl=self.config.metadata_cache_ttl,
            )
        except ArchiveUnreadable as exc:
            logger.warning("Cannot read package %s: %s", filename, exc)
            return None

    def generate_download_url(self, package: Package, server_url: str) -> str:
        return add_query_arg({"action": "download", "slug": package.slug}, server_url)

    # ─── Assets ───────────────────────────────────────────────────────────────

    def get_banners(self, package: Package, server_url: str) -> Optional[dict[str, str]]:
        """``{"low": 772x250 url, "high": 1544x500 url}``; ``high`` only alongside ``low``."""
        low = self.find_first_asset(package, server_url, "banners", "-772x250")
        if low is None:
            return None
        banners = {"low": low}
        high = self.find_first_asset(package, server_url, "banners", "-1544x500")
        if high is not None:
            banners["high"] = high
        return banners

    def get_icons(self, package: Package, server_url: str) -> Optional[dict[str, str]]:
        icons = {
            "1x": self.find_first_asset(package, server_url, "icons", "-128x128"),
            "2x": self.find_first_asset(package, server_url, "icons", "-256x256"),
            "svg": self.find_first_asset(package, server_url, "icons", "", ("svg",)),
        }
        icons = {key: url for key, url in icons.items() if url}
        return icons or None

    def find_first_asset(
        self,
        package: Package,
        server_url: str,
        asset_type: str = "banners",
        suffix: str = "",
        extensions: Union[tuple[str, ...], list[str]] = IMAGE_EXTENSIONS,
    ) -> Optional[str]:
        """URL of ``<slug><suffix>.<ext>`` for the first extension that exists."""
        directory = self.asset_directories[asset_type]
        for extension in extensions:
            candidate = directory / f"{package.slug}{suffix}.{extension}"
            if candidate.is_file():
                return self.generate_asset_url(asset_type, candidate.name, server_url)
        return None

    def generate_asset_url(self, asset_type: str, relative_filename: str, server_url: str) -> str:
        subdirectory = self.asset_directories[asset_type].name
        return f"{server_url}{subdirectory}/{relative_filename}"

    # ─── Logging ──────────────────────────────────────────────────────────────

    def log_request(self, request: UpdateRequest) -> None:
        if self.request_log is None:
            return
        columns = self.filter_log_columns(self.request_log.columns(request), request)
        try:
            self.request_log.write(columns)
        except (OSError, TimeoutError) as exc:
            logger.error("Failed to write request log: %s", exc)

    def filter_log_columns(self, columns: dict[str, str], request: UpdateRequest) -> dict[str, str]:
        """Hook for subclasses to add, drop or mask logged columns."""
        return columns
