"""Archive, header and readme parsing."""

from wpup.parsing.archive import ArchiveReader
from wpup.parsing.headers import extract_headers, get_plugin_headers, get_theme_headers
from wpup.parsing.package import parse_package
from wpup.parsing.readme import parse_readme

__all__ = [
    "ArchiveReader",
    "extract_headers",
    "get_plugin_headers",
    "get_theme_headers",
    "parse_package",
    "parse_readme",
]
