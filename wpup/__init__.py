"""wpup — self-hosted update API for WordPress plugins and themes.

Usage:
    from wpup import FileCache, Package

    package = Package.from_archive("packages/my-plugin.zip", cache=FileCache("cache"))
    print(package.get_metadata()["version"])
"""

from wpup.types import ArchiveEntry, Metadata, PackageInfo, PackageType, ReadmeDocument
from wpup.exceptions import WpupError, ArchiveUnreadable, InvalidPackage
from wpup.cache import Cache, FileCache
from wpup.core import Package, build_metadata, extract_metadata
from wpup.parsing import parse_package, parse_readme
from wpup.version import __version__

__all__ = [
    "ArchiveEntry", "Metadata", "PackageInfo", "PackageType", "ReadmeDocument",
    "WpupError", "ArchiveUnreadable", "InvalidPackage",
    "Cache", "FileCache",
    "Package", "build_metadata", "extract_metadata",
    "parse_package", "parse_readme",
    "__version__",
]
