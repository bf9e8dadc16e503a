"""readme.txt parser for the WordPress.org readme format.

The layout is fixed::

    === Plugin Name ===
    Contributors: alice, bob
    Tags: cache, speed
    Requires at least: 6.0
    Tested up to: 6.5
    Stable tag: 1.2.3

    Short description on one line.

    == Description ==
    ...

This does not try to reproduce every quirk of the wordpress.org parser.
Sections are raw text unless rendered, in which case "= 1.0 =" sub-headings
become <h4> tags and the rest goes through Markdown.
"""

from __future__ import annotations

import re
from typing import Optional

import markdown

from wpup.parsing.headers import split_list
from wpup.types import ReadmeDocument

_TITLE = re.compile(r"===\s*(.+?)\s*===")
# Exactly two equals signs: "=== x ===" is the title and "= x =" a sub-heading.
_SECTION = re.compile(r"^\s*==\s+(.+?)\s+==\s*$")
# "= 1.2.3 =" sub-headings, as used in changelogs and upgrade notices
_SUB_HEADING = re.compile(r"^[ \t]*=[ \t]*(.+?)[ \t]*=[ \t]*$", re.MULTILINE)

# readme header name -> ReadmeDocument field
README_HEADER_FIELDS: tuple[tuple[str, str], ...] = (
    ("Contributors", "contributors"),
    ("Donate link", "donate_link"),
    ("Tags", "tags"),
    ("Requires at least", "requires_version"),
    ("Tested up to", "tested_version"),
    ("Stable tag", "stable_tag"),
)
_LIST_FIELDS = frozenset({"contributors", "tags"})


def render_section(text: str) -> str:
    """HTML for a readme section: sub-headings to <h4>, then Markdown."""
    text = _SUB_HEADING.sub(r"\n<h4>\1</h4>\n", text)
    return markdown.markdown(text)


def parse_readme(text: str, apply_markdown: bool = False) -> Optional[ReadmeDocument]:
    """Parse readme.txt contents.

    Args:
        text: File contents.
        apply_markdown: Render each section with :func:`render_section`.

    Returns:
        A ReadmeDocument, or ``None`` if the first line is not a
        ``=== Title ===`` line (the file is then not treated as a readme).
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n").strip(" \t\n")
    lines = text.split("\n")

    title = _TITLE.search(lines.pop(0))
    if not title:
        return None

    # "Field: value" lines up to the first blank line
    known = dict(README_HEADER_FIELDS)
    fields: dict[str, object] = {}
    while lines:
        line = lines.pop(0)
        if not line.strip():
            break
        key, sep, value = line.partition(":")
        if key in known:
            value = value.strip() if sep else ""
            field = known[key]
            fields[field] = split_list(value) if field in _LIST_FIELDS else value

    short_description = lines.pop(0) if lines else ""

    sections: dict[str, str] = {}
    current: Optional[str] = None
    buffer: list[str] = []
    for line in lines:
        match = _SECTION.match(line)
        if match:
            if current:
                sections[current] = "\n".join(buffer).strip()
            current = match.group(1)
            buffer = []
        else:
            buffer.append(line)
    if current:
        sections[current] = "\n".join(buffer).strip()

    if apply_markdown:
        sections = {name: render_section(body) for name, body in sections.items()}

    return ReadmeDocument(
        name=title.group(1),
        short_description=short_description,
        sections=sections,
        **fields,
    )
