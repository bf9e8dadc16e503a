"""UpdateRequest — one call to the update API."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from wpup.core.package import Package

_ACTION_UNSAFE = re.compile(r"[^a-z0-9\-_]", re.IGNORECASE)
_SLUG_UNSAFE = re.compile(r"[:?/\\]")
# "WordPress/6.5.2; https://example.com" as sent by the WordPress HTTP API
_WORDPRESS_USER_AGENT = re.compile(
    r"WordPress/(?P<version>\d[^;]*?);\s+(?P<url>https?://.+?)(?:\s|;|$)",
    re.IGNORECASE,
)


class UpdateRequest:
    """Query parameters, headers and client details of an update API call.

    ``action`` and ``slug`` are sanitized on construction. ``package`` is
    filled in by the server once the slug has been looked up.
    """

    def __init__(
        self,
        query: Mapping[str, str],
        headers: Optional[Mapping[str, str]] = None,
        client_ip: str = "0.0.0.0",
        http_method: str = "GET",
    ):
        self.query = dict(query)
        self.headers = {name.lower(): value for name, value in (headers or {}).items()}
        self.client_ip = client_ip
        self.http_method = http_method.upper()

        self.action = _ACTION_UNSAFE.sub("", self.param("action", ""))
        self.slug = _SLUG_UNSAFE.sub("", self.param("slug", ""))
        self.package: Optional[Package] = None

        self.wp_version: Optional[str] = None
        self.wp_site_url: Optional[str] = None
        match = _WORDPRESS_USER_AGENT.search(self.header("User-Agent", ""))
        if match:
            self.wp_version = match.group("version")
            self.wp_site_url = match.group("url")

    def param(self, name: str, default: Any = None) -> Any:
        return self.query.get(name, default)

    def header(self, name: str, default: Any = None) -> Any:
        return self.headers.get(name.lower(), default)
