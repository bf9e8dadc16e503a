"""Locate and parse the header file and readme.txt inside a package ZIP."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from wpup.exceptions import InvalidPackage
from wpup.parsing.archive import ArchiveReader
from wpup.parsing.headers import HEADER_SCAN_BYTES, get_plugin_headers, get_theme_headers
from wpup.parsing.readme import parse_readme
from wpup.types import ArchiveEntry, HeaderValue, PackageInfo, PackageType, ReadmeDocument

logger = logging.getLogger(__name__)

# Packages are laid out as slug/files...; nothing deeper is scanned.
MAX_ENTRY_DEPTH = 1


def normalize_entry_name(name: str) -> str:
    """Forward slashes only, no leading or trailing slash."""
    return name.replace("\\", "/").strip("/")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _candidates(entries: list[ArchiveEntry]) -> list[tuple[str, ArchiveEntry]]:
    """Files at depth <= 1, in archive order, with normalized names."""
    result = []
    for entry in entries:
        name = normalize_entry_name(entry.name)
        if entry.is_directory or not name or name.count("/") > MAX_ENTRY_DEPTH:
            continue
        result.append((name, entry))
    return result


def parse_package(path: Union[str, Path], apply_markdown: bool = False) -> PackageInfo:
    """Extract headers and readme.txt data from a plugin or theme ZIP.

    With *apply_markdown* the readme sections are rendered to HTML.

    Scans entries in archive order. The first readme.txt that parses is kept.
    A theme stylesheet beats a plugin script wherever it appears in the scan;
    the scan stops early once the readme and a final header are both known.

    Raises:
        ArchiveUnreadable: the file is missing, unreadable, or not a ZIP.
        InvalidPackage: no plugin header or theme stylesheet was found.
    """
    header: Optional[dict[str, HeaderValue]] = None
    readme: Optional[ReadmeDocument] = None
    main_file: Optional[str] = None
    package_type: Optional[PackageType] = None

    with ArchiveReader.open(path) as archive:
        candidates = _candidates(archive.list_entries())
        stylesheets_left = sum(
            1 for name, _ in candidates if PurePosixPath(name).name.lower() == "style.css"
        )

        for name, entry in candidates:
            if readme is not None and (
                package_type is PackageType.THEME
                or (package_type is PackageType.PLUGIN and stylesheets_left == 0)
            ):
                break

            basename = PurePosixPath(name).name.lower()

            if readme is None and basename == "readme.txt":
                readme = parse_readme(_decode(archive.read_entry(entry)), apply_markdown)
                if readme is None:
                    logger.debug("Ignoring malformed readme %s in %s", name, archive.path)

            if basename == "style.css":
                stylesheets_left -= 1
                if package_type is not PackageType.THEME:
                    theme_header = get_theme_headers(
                        _decode(archive.read_entry(entry, limit=HEADER_SCAN_BYTES))
                    )
                    if theme_header is not None:
                        header, main_file, package_type = theme_header, name, PackageType.THEME

            if header is None and PurePosixPath(basename).suffix == ".php":
                plugin_header = get_plugin_headers(
                    _decode(archive.read_entry(entry, limit=HEADER_SCAN_BYTES))
                )
                if plugin_header is not None:
                    header, main_file, package_type = plugin_header, name, PackageType.PLUGIN

    if package_type is None:
        raise InvalidPackage(
            f"The specified file {path} does not contain a valid WordPress plugin or theme.",
            path=str(path),
        )

    return PackageInfo(type=package_type, header=header, readme=readme, main_file=main_file)
