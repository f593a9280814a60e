"""Tests for table of contents generation."""

from __future__ import annotations

from textwrap import dedent

from outlinemark.transforms.results import ErrorCode
from outlinemark.transforms.toc import (
    Section,
    TocLocation,
    find_existing_toc,
    find_sections,
    find_toc_position,
    generate_toc_lines,
    is_metadata,
    is_section,
    process_toc,
    replace_toc,
)

SAMPLE_DOC = dedent(
    """\
    RFC Test Document
    -----------------
    Author        John Doe
    Date          2025-03-13
    Status        Draft

    This is a test document for the TOC generator.

    1. Introduction

    This is the introduction section.

    2. Main Section

    This is the main section.

    2.1. Subsection One

    This is subsection one.

    2.2. Subsection Two

    This is subsection two.

    3. Conclusion

    This is the conclusion section."""
)

DOC_WITH_TOC = dedent(
    """\
    RFC Test Document
    -----------------
    Author        John Doe
    Date          2025-03-13
    Status        Draft

    TABLE OF CONTENTS
    -----------------

    Old TOC content that should be replaced

    1. Introduction

    This is the introduction section.

    2. Main Section

    This is the main section."""
)

DOC_WITHOUT_SECTIONS = dedent(
    """\
    RFC Test Document
    -----------------
    Author        John Doe
    Date          2025-03-13
    Status        Draft

    This is a test document with no sections."""
)

EXPECTED_TOC = [
    "TABLE OF CONTENTS",
    "-----------------",
    "",
    "1. Introduction",
    "2. Main Section",
    "    2.1. Subsection One",
    "    2.2. Subsection Two",
    "3. Conclusion",
]


class TestPredicates:
    """Tests for line classification."""

    def test_is_section(self) -> None:
        assert is_section("1. Introduction")
        assert is_section("2.1. Details")
        assert is_section("INTRODUCTION")
        assert is_section("SECURITY CONSIDERATIONS")
        assert is_section(": Appendix")
        assert not is_section("Introduction")
        assert not is_section("2.1 Details")
        assert not is_section("plain text")

    def test_is_metadata(self) -> None:
        assert is_metadata("Author        John Doe")
        assert is_metadata("Date          2025-03-13")
        assert not is_metadata("RFC Test Document")
        assert not is_metadata("1. Introduction")


class TestFindSections:
    """Tests for section discovery."""

    def test_numbered_sections(self) -> None:
        sections = find_sections(SAMPLE_DOC)
        assert [s.name for s in sections] == [
            "1. Introduction",
            "2. Main Section",
            "2.1. Subsection One",
            "2.2. Subsection Two",
            "3. Conclusion",
        ]
        assert [s.level for s in sections] == [1, 1, 2, 2, 1]
        assert sections[2].prefix == "2.1."
        assert all(s.is_numbered for s in sections)

    def test_uppercase_and_alternative_sections(self) -> None:
        text = "Title\n\nINTRODUCTION\n\nText.\n\n1. Details\n\n: Appendix\n"
        sections = find_sections(text)
        assert [(s.name, s.level, s.prefix) for s in sections] == [
            ("INTRODUCTION", 1, ""),
            ("1. Details", 1, "1."),
            (": Appendix", 1, ":"),
        ]
        assert [s.line for s in sections] == [2, 6, 8]
        assert not sections[0].is_numbered
        assert not sections[2].is_numbered

    def test_existing_toc_entries_skipped(self) -> None:
        sections = find_sections(DOC_WITH_TOC)
        assert [s.name for s in sections] == ["1. Introduction", "2. Main Section"]


class TestFindExistingToc:
    """Tests for locating an existing TOC block."""

    def test_found(self) -> None:
        assert find_existing_toc(DOC_WITH_TOC.split("\n")) == TocLocation(6, 9)

    def test_not_found(self) -> None:
        assert find_existing_toc(SAMPLE_DOC.split("\n")) is None

    def test_empty_block_at_end(self) -> None:
        lines = ["Title", "", "TABLE OF CONTENTS", "-----------------", ""]
        assert find_existing_toc(lines) == TocLocation(2, 3)


class TestTocPosition:
    """Tests for choosing where a new TOC goes."""

    def test_after_metadata(self) -> None:
        assert find_toc_position(SAMPLE_DOC.split("\n")) == 6

    def test_after_underlined_title(self) -> None:
        lines = ["My Title", "--------", "", "Body"]
        assert find_toc_position(lines) == 3

    def test_default(self) -> None:
        assert find_toc_position(["a", "b", "c", "d"]) == 3
        assert find_toc_position(["a"]) == 1


def test_generate_toc_lines():
    assert generate_toc_lines(find_sections(SAMPLE_DOC)) == EXPECTED_TOC


def test_generate_toc_lines_indents_deeper_levels_once():
    sections = [Section(name="1.1.1. Deep", level=3, line=0, prefix="1.1.1.")]
    assert generate_toc_lines(sections)[-1] == "    1.1.1. Deep"


def test_replace_toc_inserts():
    result = replace_toc(SAMPLE_DOC, EXPECTED_TOC, None)
    lines = result.split("\n")
    assert lines[:6] == SAMPLE_DOC.split("\n")[:6]
    assert lines[6:14] == EXPECTED_TOC
    assert lines[14] == ""
    assert lines[15] == "This is a test document for the TOC generator."


def test_replace_toc_replaces():
    toc_lines = generate_toc_lines(find_sections(DOC_WITH_TOC))
    result = replace_toc(DOC_WITH_TOC, toc_lines, find_existing_toc(DOC_WITH_TOC.split("\n")))
    assert "Old TOC content" not in result
    assert result.split("\n")[6:13] == [
        "TABLE OF CONTENTS",
        "-----------------",
        "",
        "1. Introduction",
        "2. Main Section",
        "",
        "1. Introduction",
    ]


def test_replace_toc_empty_lines_is_noop():
    assert replace_toc(SAMPLE_DOC, [], None) == SAMPLE_DOC


def test_process_toc():
    result = process_toc(SAMPLE_DOC)
    assert result.success
    assert result.sections_found == 5
    assert result.new_text is not None
    assert "\n".join(EXPECTED_TOC) in result.new_text


def test_process_toc_idempotent():
    once = process_toc(SAMPLE_DOC).new_text
    assert once is not None
    assert process_toc(once).new_text == once


def test_process_toc_without_sections():
    result = process_toc(DOC_WITHOUT_SECTIONS)
    assert not result.success
    assert result.new_text is None
    assert result.error is not None
    assert result.error.code == ErrorCode.no_sections_found


def test_process_toc_errors_are_reported():
    result = process_toc(None)  # pyright: ignore[reportArgumentType]
    assert not result.success
    assert result.error is not None
    assert result.error.code == ErrorCode.processing_error


def test_process_toc_keeps_crlf_endings():
    text = "Title\r\n-----\r\n\r\n1. Intro\r\n\r\nText.\r\n"
    result = process_toc(text)
    assert result.new_text is not None
    assert result.new_text.count("\n") == result.new_text.count("\r\n")
    assert "TABLE OF CONTENTS\r\n-----------------\r\n\r\n1. Intro\r\n\r\n1. Intro\r\n" in (
        result.new_text
    )
    assert process_toc(result.new_text).new_text == result.new_text


def test_non_ascii_digits_are_not_sections():
    assert not is_section("١. Title")
    assert find_sections("١. Title\n٢.١. Sub\n") == []
