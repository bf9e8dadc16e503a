"""Map parsed package data onto the metadata format served to update checkers."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Optional

from wpup.types import Metadata, PackageInfo, PackageType, ReadmeDocument

# header key -> metadata key. Homepage is handled per package type.
HEADER_METADATA_FIELDS: tuple[tuple[str, str], ...] = (
    ("Name", "name"),
    ("Version", "version"),
    ("Author", "author"),
    ("AuthorURI", "author_homepage"),
    ("DetailsURI", "details_url"),      # themes only
    ("Depends", "depends"),             # plugin-dependencies convention
    ("Provides", "provides"),
)

HOMEPAGE_HEADER: dict[PackageType, str] = {
    PackageType.PLUGIN: "PluginURI",
    PackageType.THEME: "ThemeURI",
}

# ReadmeDocument field -> metadata key
README_METADATA_FIELDS: tuple[tuple[str, str], ...] = (
    ("requires_version", "requires"),
    ("tested_version", "tested"),
)

LAST_UPDATED_FORMAT = "%Y-%m-%d %H:%M:%S"

_HTML_TAG = re.compile(r"<[^>]*>")


def section_key(title: str) -> str:
    """Metadata key for a readme section title, e.g. ``upgrade_notice``."""
    return title.lower().replace(" ", "_")


def find_upgrade_notice(upgrade_notice_section: str, version: str) -> Optional[str]:
    """Return the notice paragraph under ``<h4>version</h4>``, tags stripped."""
    pattern = re.compile(
        r"<h4>\s*" + re.escape(version) + r"\s*</h4>[^<>]*?<p>(.+?)</p>",
        re.IGNORECASE,
    )
    match = pattern.search(upgrade_notice_section)
    if not match:
        return None
    return _HTML_TAG.sub("", match.group(1)).strip()


def format_timestamp(modified_time: float) -> str:
    return datetime.fromtimestamp(modified_time, tz=timezone.utc).strftime(LAST_UPDATED_FORMAT)


def package_slug(main_file: str) -> str:
    """Directory that holds the main file, lower-cased ("" at the archive root)."""
    return PurePosixPath(main_file.lower()).parent.name


def _from_header(info: PackageInfo) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for header_key, meta_key in HEADER_METADATA_FIELDS:
        value = info.header.get(header_key)
        if value:
            fields[meta_key] = value

    homepage = info.header.get(HOMEPAGE_HEADER[info.type])
    if homepage:
        fields["homepage"] = homepage

    # "View version x.y.z details" needs a page; themes fall back to their homepage.
    if info.type is PackageType.THEME and "details_url" not in fields and "homepage" in fields:
        fields["details_url"] = fields["homepage"]
    return fields


def _from_readme(readme: ReadmeDocument, version: Optional[str]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for readme_field, meta_key in README_METADATA_FIELDS:
        value = getattr(readme, readme_field)
        if value:
            fields[meta_key] = value

    if readme.sections:
        sections = {section_key(title): content for title, content in readme.sections.items()}
        fields["sections"] = sections

        if "upgrade_notice" in sections and version:
            notice = find_upgrade_notice(sections["upgrade_notice"], version)
            if notice is not None:
                fields["upgrade_notice"] = notice
    return fields


def build_metadata(info: PackageInfo, modified_time: float) -> Metadata:
    """Build the public Metadata record for a parsed package.

    Args:
        info: Result of :func:`wpup.parsing.package.parse_package`.
        modified_time: Archive mtime (epoch seconds), used for ``last_updated``.
    """
    fields = _from_header(info)
    if info.readme is not None:
        fields.update(_from_readme(info.readme, fields.get("version")))
    fields.setdefault("last_updated", format_timestamp(modified_time))
    fields["slug"] = package_slug(info.main_file)
    return Metadata(**fields)
