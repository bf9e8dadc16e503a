"""Plugin and theme file headers ("Plugin Name: Foo" style comment blocks).

Adapted from the way WordPress itself reads headers: every tag sits on its
own line near the top of the file, optionally behind comment markers, and
only the first 8 KiB of the file are ever scanned.
"""

from __future__ import annotations

import re
from typing import Optional

from wpup.types import HeaderValue

# WordPress scans this many bytes; headers below it are ignored.
HEADER_SCAN_BYTES = 8 * 1024

# (internal key, tag as written in the file)
PLUGIN_HEADER_FIELDS: tuple[tuple[str, str], ...] = (
    ("Name", "Plugin Name"),
    ("PluginURI", "Plugin URI"),
    ("Version", "Version"),
    ("Description", "Description"),
    ("Author", "Author"),
    ("AuthorURI", "Author URI"),
    ("TextDomain", "Text Domain"),
    ("DomainPath", "Domain Path"),
    ("Network", "Network"),
    ("Depends", "Depends"),
    ("Provides", "Provides"),
    # Deprecated spelling of Network
    ("_sitewide", "Site Wide Only"),
)

THEME_HEADER_FIELDS: tuple[tuple[str, str], ...] = (
    ("Name", "Theme Name"),
    ("ThemeURI", "Theme URI"),
    ("Description", "Description"),
    ("Author", "Author"),
    ("AuthorURI", "Author URI"),
    ("Version", "Version"),
    ("Template", "Template"),
    ("Status", "Status"),
    ("Tags", "Tags"),
    ("TextDomain", "Text Domain"),
    ("DomainPath", "Domain Path"),
    ("DetailsURI", "Details URI"),
)

# Everything from a comment close or PHP close tag onward is not part of the value.
_TRAILING_MARKERS = re.compile(r"\s*(?:\*/|\?>).*")
_HTML_TAG = re.compile(r"<[^>]*>")


def extract_headers(text: str, field_map: tuple[tuple[str, str], ...]) -> dict[str, str]:
    """Find each tag in *text* and return ``{internal_key: value}``.

    Every key in *field_map* is present in the result; tags that are absent
    map to an empty string.
    """
    # Old Mac line endings
    text = text.replace("\r", "\n")

    headers: dict[str, str] = {}
    for field, tag in field_map:
        pattern = re.compile(r"^[ \t/*#@]*" + re.escape(tag) + r":(.*)$", re.MULTILINE | re.IGNORECASE)
        match = pattern.search(text)
        if match and match.group(1):
            headers[field] = _TRAILING_MARKERS.sub("", match.group(1)).strip()
        else:
            headers[field] = ""
    return headers


def split_list(value: str) -> list[str]:
    """Split a comma list, trimming items and dropping empty ones."""
    return [item.strip() for item in value.split(",") if item.strip()]


def get_plugin_headers(text: str) -> Optional[dict[str, HeaderValue]]:
    """Parse a plugin's main PHP file. ``None`` if it has no Plugin Name."""
    raw = extract_headers(text, PLUGIN_HEADER_FIELDS)
    if not raw["Name"]:
        return None

    sitewide = raw.pop("_sitewide")
    headers: dict[str, HeaderValue] = dict(raw)
    network = raw["Network"] or sitewide
    headers["Network"] = network.lower() == "true"
    headers["Title"] = raw["Name"]
    if raw["Depends"]:
        headers["Depends"] = split_list(raw["Depends"])
    if raw["Provides"]:
        headers["Provides"] = split_list(raw["Provides"])
    return headers


def get_theme_headers(text: str) -> Optional[dict[str, HeaderValue]]:
    """Parse a theme's style.css. ``None`` if it has no Theme Name."""
    raw = extract_headers(text, THEME_HEADER_FIELDS)
    if not raw["Name"]:
        return None

    headers: dict[str, HeaderValue] = dict(raw)
    headers["Tags"] = split_list(_HTML_TAG.sub("", raw["Tags"]))
    return headers
