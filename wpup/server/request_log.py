"""Flat-file request log for the update API.

One tab-separated line per request::

    [2024-05-01 12:00:00 +0000] 203.0.113.7     GET  get_metadata  my-plugin  1.0  6.5  https://site.example  action=...

With rotation enabled the file name carries a date suffix
(``request-2024-05.log``) and only the newest ``backup_count`` files are kept.
"""

from __future__ import annotations

import ipaddress
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlencode

from wpup.cache.locks import file_lock
from wpup.server.request import UpdateRequest

logger = logging.getLogger("wpup.requests")

ROTATION_FORMATS = {
    "day": "%Y-%m-%d",
    "month": "%Y-%m",
}

# Zero the last 8 bits of IPv4 and the last 80 bits of IPv6 addresses.
_IPV4_MASK = int("ffffff00", 16)
_IPV6_MASK = int("ffffffffffff" + "0" * 20, 16)


def anonymize_ip(ip: str) -> str:
    """Zero the host part of *ip*. Anything that is not an IP is returned unchanged."""
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return ip
    if address.version == 4:
        return str(ipaddress.IPv4Address(int(address) & _IPV4_MASK))
    return str(ipaddress.IPv6Address(int(address) & _IPV6_MASK))


class RequestLog:
    """Appends one line per API request to ``<log_directory>/request*.log``.

    Args:
        log_directory: Where log files live. Created on first use.
        rotation: ``None``, ``"day"`` or ``"month"``.
        backup_count: Rotated files to keep. ``0`` keeps all of them.
        anonymize_ips: Mask client addresses before writing.
    """

    def __init__(
        self,
        log_directory: Union[str, Path],
        rotation: Optional[str] = None,
        backup_count: int = 10,
        anonymize_ips: bool = False,
    ):
        if rotation is not None and rotation not in ROTATION_FORMATS:
            raise ValueError(f"Unknown log rotation period: {rotation!r}")
        self.log_directory = Path(log_directory)
        self.rotation = rotation
        self.backup_count = backup_count
        self.anonymize_ips = anonymize_ips

    def filename(self, now: Optional[datetime] = None) -> Path:
        name = "request"
        if self.rotation:
            name += "-" + (now or datetime.now()).strftime(ROTATION_FORMATS[self.rotation])
        return self.log_directory / f"{name}.log"

    def columns(self, request: UpdateRequest) -> dict[str, str]:
        ip = anonymize_ip(request.client_ip) if self.anonymize_ips else request.client_ip
        return {
            "ip": ip.ljust(15),
            "http_method": request.http_method.ljust(4),
            "action": request.param("action", "-"),
            "slug": request.param("slug", "-"),
            "installed_version": request.param("installed_version", "-"),
            "wp_version": request.wp_version or "-",
            "site_url": request.wp_site_url or "-",
            "query": urlencode(request.query),
        }

    def write(self, columns: dict[str, str], now: Optional[datetime] = None) -> None:
        """Append a formatted line and rotate if this started a new file."""
        now = now or datetime.now().astimezone()
        self.log_directory.mkdir(parents=True, exist_ok=True)
        log_file = self.filename(now)
        must_rotate = self.rotation is not None and not log_file.exists()

        line = now.strftime("[%Y-%m-%d %H:%M:%S %z]") + " " + "\t".join(columns.values()) + "\n"
        with open(log_file, "a", encoding="utf-8") as handle, file_lock(handle):
            handle.write(line)
            if must_rotate:
                self.rotate()
        logger.debug(line.rstrip("\n"))

    def rotate(self) -> None:
        """Delete all but the newest ``backup_count`` dated log files. ``request.log`` is left alone."""
        if self.backup_count == 0:
            return
        log_files = sorted(self.log_directory.glob("request-*.log"), reverse=True)
        # The date suffix sorts chronologically, so the newest files come first.
        for old_file in log_files[self.backup_count:]:
            old_file.unlink(missing_ok=True)
