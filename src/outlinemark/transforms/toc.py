"""
Table of contents generation for plain-text outline documents.

Sections are found by line shape:
- Numbered: "2.1. Title" (level = number of components)
- Uppercase: "INTRODUCTION" (level 1)
- Alternative: ": Title" (level 1)

The generated block looks like:

    TABLE OF CONTENTS
    -----------------

    1. Introduction
    2. Design
        2.1. Goals

An existing block (from the `TABLE OF CONTENTS` line through its last entry) is
replaced in place. Otherwise a new block is inserted after the metadata lines,
or after an underlined title, or at line 3.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from outlinemark.transforms.results import ErrorCode, ErrorInfo, TocResult, error_message

TOC_HEADER = "TABLE OF CONTENTS"

TOC_INDENT = "    "

_NUMBERED_SECTION = re.compile(r"^([0-9]+(?:\.[0-9]+)*)\. (.*)$")
_UPPERCASE_SECTION = re.compile(r"^[A-Z][A-Z\s-]+$")
_ALTERNATIVE_SECTION = re.compile(r"^: (.*)$")
_UNDERLINE = re.compile(r"^-+$")
_METADATA = re.compile(r"^[A-Za-z][A-Za-z\s]+\s{2,}[A-Za-z0-9]")


@dataclass
class Section:
    """A section heading found in a document."""

    name: str
    """Display name, including any number prefix, e.g. "2.1. Goals"."""

    level: int
    line: int

    prefix: str
    """"2.1." for numbered sections, ":" for alternative ones, "" otherwise."""

    @property
    def is_numbered(self) -> bool:
        return self.prefix not in ("", ":")


@dataclass
class TocLocation:
    """Line range of an existing TOC block, inclusive at both ends."""

    start_line: int
    end_line: int


def is_section(line: str) -> bool:
    """Whether a (stripped) line is a section heading of any kind."""
    return bool(
        re.match(r"^[0-9]+(\.[0-9]+)*\.\s+\S", line)
        or _UPPERCASE_SECTION.match(line)
        or re.match(r"^:\s+\S", line)
    )


def is_metadata(line: str) -> bool:
    """Whether a (stripped) line is a metadata entry like `Author        Jane Doe`."""
    return bool(_METADATA.match(line))


def find_existing_toc(lines: Sequence[str]) -> TocLocation | None:
    """
    Find an existing TOC block: the header line, an optional underline, blank
    lines, then the run of non-blank entry lines. The location ends at the last
    entry (or at the header/underline if the block is empty).
    """
    for i, line in enumerate(lines):
        if line.strip() != TOC_HEADER:
            continue
        end = i
        j = i + 1
        if j < len(lines) and _UNDERLINE.match(lines[j].strip()):
            end = j
            j += 1
        while j < len(lines) and not lines[j].strip():
            j += 1
        while j < len(lines) and lines[j].strip():
            end = j
            j += 1
        return TocLocation(start_line=i, end_line=end)
    return None


def find_sections(text: str) -> list[Section]:
    """
    Find all sections in document order. Lines inside an existing TOC block are
    skipped, since its entries repeat the section names.
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    existing = find_existing_toc(lines)

    sections: list[Section] = []
    for index, line in enumerate(lines):
        if existing and existing.start_line <= index <= existing.end_line:
            continue

        numbered = _NUMBERED_SECTION.match(line)
        if numbered:
            number, title = numbered.group(1), numbered.group(2).strip()
            sections.append(
                Section(
                    name=f"{number}. {title}",
                    level=len(number.split(".")),
                    line=index,
                    prefix=f"{number}.",
                )
            )
            continue

        alternative = _ALTERNATIVE_SECTION.match(line)
        if alternative:
            sections.append(
                Section(name=f": {alternative.group(1).strip()}", level=1, line=index, prefix=":")
            )
            continue

        if _UPPERCASE_SECTION.match(line):
            sections.append(Section(name=line.strip(), level=1, line=index, prefix=""))

    return sections


def find_toc_position(lines: Sequence[str]) -> int:
    """
    Find the line index at which to insert a new TOC.

    In order of preference: two lines past the end of the metadata block (so the
    blank line after the metadata is kept), just after the first blank line
    following an underlined title, or line 3.
    """
    in_metadata = False
    metadata_end = -1
    for i, raw_line in enumerate(lines):
        line = raw_line.strip()
        if is_metadata(line):
            in_metadata = True
            metadata_end = i
        elif in_metadata and not line:
            return metadata_end + 2

    if len(lines) > 2 and _UNDERLINE.match(lines[1].strip()):
        for i in range(2, len(lines)):
            if not lines[i].strip():
                return i + 1

    return min(3, len(lines))


def generate_toc_lines(sections: Sequence[Section]) -> list[str]:
    """Render TOC lines: header, underline, blank line, then one line per section."""
    toc_lines = [TOC_HEADER, "-" * len(TOC_HEADER), ""]
    for section in sections:
        indent = TOC_INDENT if section.level > 1 else ""
        toc_lines.append(f"{indent}{section.name.strip()}")
    return toc_lines


def replace_toc(text: str, toc_lines: Sequence[str], location: TocLocation | None) -> str:
    """
    Replace the TOC block at `location`, or insert `toc_lines` (plus a blank
    line) at the default position if there is no existing block. In a document
    with CRLF line endings the inserted lines get CRLF endings too.
    """
    if not toc_lines:
        return text

    lines = text.split("\n")
    ending = "\r" if any(line.endswith("\r") for line in lines) else ""
    block = [f"{line}{ending}" for line in toc_lines]
    if location:
        new_lines = [*lines[: location.start_line], *block, *lines[location.end_line + 1 :]]
    else:
        position = find_toc_position(lines)
        new_lines = [*lines[:position], *block, ending, *lines[position:]]
    return "\n".join(new_lines)


def process_toc(text: str) -> TocResult:
    """
    Add or update the table of contents of a document.

    Fails with `no_sections_found` if the document has no numbered sections.
    Never raises.
    """
    try:
        sections = find_sections(text)
        if not any(section.is_numbered for section in sections):
            return TocResult(
                success=False,
                error=ErrorInfo(ErrorCode.no_sections_found, "No sections found to generate TOC"),
            )

        location = find_existing_toc(text.split("\n"))
        new_text = replace_toc(text, generate_toc_lines(sections), location)
        return TocResult(success=True, new_text=new_text, sections_found=len(sections))
    except Exception as e:
        return TocResult(
            success=False,
            error=ErrorInfo(
                ErrorCode.processing_error, f"Error generating TOC: {error_message(e)}"
            ),
        )
