"""Application configuration. All env vars defined here with defaults.

Directory settings left unset resolve under ``server_dir`` (packages/,
cache/, logs/, banners/, icons/).
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class WpupConfig(BaseSettings):
    # ── App ──
    app_name: str = "wpup"
    debug: bool = False
    log_level: str = "INFO"

    # ── Directories ──
    server_dir: Path = Path(".")
    packages_dir: Optional[Path] = None
    cache_dir: Optional[Path] = None
    logs_dir: Optional[Path] = None
    banners_dir: Optional[Path] = None
    icons_dir: Optional[Path] = None

    # ── Server ──
    server_url: Optional[str] = None            # public base URL; guessed from the request if unset
    host: str = "0.0.0.0"
    port: int = 8000

    # ── Metadata cache ──
    cache_enabled: bool = True
    metadata_cache_ttl: int = 7 * 24 * 3600     # one week

    # ── Request log ──
    log_requests: bool = True
    log_rotation: Optional[Literal["day", "month"]] = None
    log_backup_count: int = 10                  # 0 = keep every rotated file
    anonymize_ips: bool = False

    # ── Downloads ──
    download_max_age: int = 0                   # seconds; 0 = no Cache-Control header

    model_config = {"env_prefix": "WPUP_", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _resolve_dirs(self):
        defaults = {
            "packages_dir": "packages",
            "cache_dir": "cache",
            "logs_dir": "logs",
            "banners_dir": "banners",
            "icons_dir": "icons",
        }
        for attr, subdir in defaults.items():
            if getattr(self, attr) is None:
                setattr(self, attr, self.server_dir / subdir)
        return self


config = WpupConfig()


__all__ = ["WpupConfig", "config"]
