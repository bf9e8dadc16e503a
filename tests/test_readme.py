"""Tests for wpup/parsing/readme.py."""

from wpup.parsing.readme import parse_readme, render_section

FULL_README = """=== Fancy Plugin ===
Contributors: alice, bob,
Donate link: https://example.com/donate
Tags: cache, speed
Requires at least: 6.0
Tested up to: 6.5
Stable tag: 2.1
License: GPLv2

Makes sites fancy.

== Description ==
Long description.

More text.

== Changelog ==
= 2.1 =
* Fix
= 2.0 =
* Initial

== Upgrade Notice ==
<h4>2.1</h4><p>Upgrade now.</p>
"""


class TestTitle:

    def test_title_line(self):
        assert parse_readme("=== My Plugin ===\n").name == "My Plugin"

    def test_surrounding_whitespace_ignored(self):
        assert parse_readme("\n\n  ===  Spaced  ===  \n").name == "Spaced"

    def test_no_title_is_not_a_readme(self):
        assert parse_readme("My Plugin\nContributors: a") is None

    def test_empty_text(self):
        assert parse_readme("") is None


class TestHeaderBlock:

    def test_known_fields(self):
        readme = parse_readme(FULL_README)
        assert readme.contributors == ["alice", "bob"]
        assert readme.donate_link == "https://example.com/donate"
        assert readme.tags == ["cache", "speed"]
        assert readme.requires_version == "6.0"
        assert readme.tested_version == "6.5"
        assert readme.stable_tag == "2.1"

    def test_short_description_follows_blank_line(self):
        assert parse_readme(FULL_README).short_description == "Makes sites fancy."

    def test_missing_fields_default_empty(self):
        readme = parse_readme("=== A ===\n\nShort.\n")
        assert readme.contributors == []
        assert readme.stable_tag == ""
        assert readme.short_description == "Short."
        assert readme.sections == {}

    def test_crlf_line_endings(self):
        readme = parse_readme("=== A ===\r\nStable tag: 1.0\r\n\r\nShort.\r\n")
        assert readme.stable_tag == "1.0"
        assert readme.short_description == "Short."


class TestSections:

    def test_sections_in_document_order(self):
        readme = parse_readme(FULL_README)
        assert list(readme.sections) == ["Description", "Changelog", "Upgrade Notice"]

    def test_section_text_trimmed(self):
        assert parse_readme(FULL_README).sections["Description"] == "Long description.\n\nMore text."

    def test_single_equals_headings_stay_inside_section(self):
        changelog = parse_readme(FULL_README).sections["Changelog"]
        assert changelog.startswith("= 2.1 =")
        assert "= 2.0 =" in changelog

    def test_text_before_first_section_dropped(self):
        readme = parse_readme("=== A ===\n\nShort.\nstray line\n== Notes ==\nkept\n")
        assert readme.sections == {"Notes": "kept"}

    def test_repeated_section_last_wins(self):
        readme = parse_readme("=== A ===\n\nShort.\n== FAQ ==\none\n== FAQ ==\ntwo\n")
        assert readme.sections == {"FAQ": "two"}


class TestRendering:

    def test_sub_heading_becomes_h4(self):
        html = render_section("= 1.2.3 =\nFixes a crash.")
        assert "<h4>1.2.3</h4>" in html
        assert "<p>Fixes a crash.</p>" in html

    def test_markdown_lists(self):
        html = render_section("* one\n* two")
        assert "<li>one</li>" in html
        assert "<li>two</li>" in html

    def test_section_heading_after_blank_line(self):
        html = render_section("Intro.\n\n= 2.0 =\nDetails.")
        assert "<p>Intro.</p>" in html
        assert "<h4>2.0</h4>" in html

    def test_rendered_on_request_only(self):
        raw = parse_readme(FULL_README)
        rendered = parse_readme(FULL_README, apply_markdown=True)
        assert raw.sections["Changelog"].startswith("= 2.1 =")
        assert "<h4>2.1</h4>" in rendered.sections["Changelog"]
        assert "<li>Fix" in rendered.sections["Changelog"]
        assert rendered.sections["Upgrade Notice"].startswith("<h4>2.1</h4>")
