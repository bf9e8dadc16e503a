"""All shared types and enums. Everything imports from here."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


# ── Enums ──────────────────────────────────────────────────────────────

class PackageType(str, Enum):
    PLUGIN = "plugin"
    THEME = "theme"


# Header values are strings, except comma lists (Depends, Provides, Tags)
# and the Network flag.
HeaderValue = Union[str, bool, list[str]]


# ── Archive ────────────────────────────────────────────────────────────

class ArchiveEntry(BaseModel):
    """One member of a ZIP container, as listed by the archive reader."""
    model_config = {"frozen": True}

    name: str                           # raw name as stored in the archive
    size: int                           # uncompressed size in bytes
    is_directory: bool
    index: int                          # position in the central directory


# ── Parse results ──────────────────────────────────────────────────────

class ReadmeDocument(BaseModel):
    """A parsed WordPress readme.txt."""
    name: str                           # from "=== Plugin Name ==="
    contributors: list[str] = Field(default_factory=list)
    donate_link: str = ""
    tags: list[str] = Field(default_factory=list)
    requires_version: str = ""          # "Requires at least"
    tested_version: str = ""            # "Tested up to"
    stable_tag: str = ""
    short_description: str = ""
    sections: dict[str, str] = Field(default_factory=dict)  # title -> raw text, document order


class PackageInfo(BaseModel):
    """Transient result of scanning one archive. Never cached directly."""
    type: PackageType
    header: dict[str, HeaderValue]
    readme: Optional[ReadmeDocument] = None
    main_file: str                      # relative path of the header source


# ── Public metadata ────────────────────────────────────────────────────

class Metadata(BaseModel):
    """Package metadata in the format the update checker expects.

    Unset fields stay ``None`` and are dropped by :meth:`to_dict`.
    """
    model_config = {"frozen": True}

    name: Optional[str] = None
    version: Optional[str] = None
    homepage: Optional[str] = None
    author: Optional[str] = None
    author_homepage: Optional[str] = None
    details_url: Optional[str] = None
    depends: Optional[list[str]] = None
    provides: Optional[list[str]] = None
    requires: Optional[str] = None
    tested: Optional[str] = None
    sections: Optional[dict[str, str]] = None
    upgrade_notice: Optional[str] = None
    last_updated: Optional[str] = None  # UTC, "YYYY-MM-DD HH:MM:SS"
    slug: str = ""

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
