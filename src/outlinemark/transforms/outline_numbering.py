"""
Section and list renumbering for plain-text outline documents.

This module re-derives consistent numbering for:
- Section headers: "1. Intro", "2.1 Details", "2.1.3. Notes"
- Ordered and lettered list items: "1. item", "    a. nested item"

Key concepts:
- A single forward pass over the lines, with all counter state kept in one
  `NumberingState` object local to the call
- Section depth is the number of dot-separated components in the header number
- List depth comes from indentation: every 4 columns is one more level
- Odd list depths use decimal markers, even depths use lowercase letters
- A line matching both header and list syntax is always a header
- Lines that match neither pattern pass through unchanged

Usage:
    from outlinemark.transforms.outline_numbering import fix_numbering

    result = fix_numbering(text)
    if result.success:
        print(f"Fixed numbering: {result.lines_changed} lines changed")
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from outlinemark.transforms.results import (
    ErrorCode,
    ErrorInfo,
    NumberingResult,
    count_changed_lines,
    error_message,
)

DEFAULT_TAB_WIDTH = 4

# Columns of indentation per list nesting level.
LIST_INDENT_COLUMNS = 4


# === Marker Conversion ===


def int_to_alpha(n: int) -> str:
    """Convert an integer to a lowercase letter string (a, b, ..., z, aa, ab, ...)."""
    if n <= 0:
        raise ValueError("Alpha values must be positive")
    result = []
    while n > 0:
        n -= 1
        result.append(chr(ord("a") + (n % 26)))
        n //= 26
    return "".join(reversed(result))


def list_marker(depth: int, value: int) -> str:
    """
    The marker text for a list item at the given depth.

    Odd depths (1, 3, 5, ...) render as decimal numbers, even depths
    (2, 4, 6, ...) as lowercase letters.

    Examples:
        >>> list_marker(1, 3)
        '3'
        >>> list_marker(2, 3)
        'c'
        >>> list_marker(2, 28)
        'ab'
    """
    if depth % 2 == 1:
        return str(value)
    return int_to_alpha(value)


# === Line Classification ===

_SECTION_HEADER = re.compile(r"^([0-9]+(?:\.[0-9]+)*)\.?\s+(.+)$")
_LIST_ITEM = re.compile(r"^(\s*)([0-9]+|[A-Za-z])\.(\s+)(.+)$")


@dataclass
class SectionHeaderMatch:
    """
    A line recognized as a numbered section header.

    Examples:
    - "2.1 Details" -> SectionHeaderMatch(["2", "1"], "Details")
    - "3. Conclusion" -> SectionHeaderMatch(["3"], "Conclusion")
    """

    components: list[str]
    title: str

    @property
    def depth(self) -> int:
        return len(self.components)


@dataclass
class ListItemMatch:
    """
    A line recognized as an ordered or lettered list item.

    Everything except `marker` is copied to the output unchanged.
    """

    indent: str
    marker: str
    spacing: str
    content: str


def match_section_header(line: str) -> SectionHeaderMatch | None:
    """
    Match a section header of the form `<int>(.<int>)*[.] <title>`.

    Returns None for anything else, including indented lines.
    """
    match = _SECTION_HEADER.match(line)
    if not match:
        return None
    return SectionHeaderMatch(components=match.group(1).split("."), title=match.group(2))


def match_list_item(line: str) -> ListItemMatch | None:
    """
    Match a list item: optional indentation, a marker that is digits or a single
    letter, a period, at least one whitespace character, then content.
    """
    match = _LIST_ITEM.match(line)
    if not match:
        return None
    return ListItemMatch(
        indent=match.group(1),
        marker=match.group(2),
        spacing=match.group(3),
        content=match.group(4),
    )


def indent_width(indent: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """
    Column width of leading whitespace. A tab advances to the next multiple of
    `tab_width`; every other character counts as one column.
    """
    column = 0
    for char in indent:
        if char == "\t" and tab_width > 0:
            column += tab_width - (column % tab_width)
        else:
            column += 1
    return column


def list_depth(indent: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Nesting depth (1 for unindented items) derived from indentation."""
    return indent_width(indent, tab_width) // LIST_INDENT_COLUMNS + 1


# === Renumbering ===


@dataclass
class NumberingState:
    """
    All counters for one renumbering pass.

    `section_stack` holds one counter per active section depth, e.g. [2, 3]
    while inside section 2.3. `list_counters` maps list depth to the current
    item count at that depth.
    """

    section_stack: list[int] = field(default_factory=list)
    list_active: bool = False
    list_depth: int = 0
    list_counters: dict[int, int] = field(default_factory=dict)

    def reset_list(self) -> None:
        self.list_active = False
        self.list_depth = 0
        self.list_counters.clear()

    def next_section_number(self, depth: int) -> str:
        """
        Advance the section counter at `depth` and return the joined number.

        Deeper counters are discarded, so the first subsection under a new
        parent starts again at 1. Shallower counters are left alone.
        """
        while len(self.section_stack) < depth:
            self.section_stack.append(0)
        if depth < len(self.section_stack):
            del self.section_stack[depth:]
        self.section_stack[depth - 1] += 1
        return ".".join(str(n) for n in self.section_stack[:depth])

    def next_list_value(self, depth: int) -> int:
        """Advance the list counter at `depth`, starting fresh on a depth change."""
        if not self.list_active or depth != self.list_depth:
            for level in [level for level in self.list_counters if level >= depth]:
                del self.list_counters[level]
            self.list_active = True
            self.list_depth = depth
        self.list_counters[depth] = self.list_counters.get(depth, 0) + 1
        return self.list_counters[depth]


def _split_line_ending(line: str) -> tuple[str, str]:
    if line.endswith("\r"):
        return line[:-1], "\r"
    return line, ""


def _fix_line(line: str, state: NumberingState, tab_width: int) -> str:
    header = match_section_header(line)
    if header:
        number = state.next_section_number(header.depth)
        # A section boundary always ends any list in progress.
        state.reset_list()
        return f"{number}. {header.title}"

    item = match_list_item(line)
    if item:
        depth = list_depth(item.indent, tab_width)
        marker = list_marker(depth, state.next_list_value(depth))
        return f"{item.indent}{marker}.{item.spacing}{item.content}"

    # Blank lines keep the list open so items may be spaced apart, and indented
    # text continues the current item. Only flush-left text ends a list.
    if line.strip() and not line[0].isspace():
        state.reset_list()
    return line


def fix_numbering_in_lines(
    lines: Sequence[str], *, tab_width: int = DEFAULT_TAB_WIDTH
) -> list[str]:
    """
    Rewrite section and list markers so numbering is consistent.

    Args:
        lines: Document lines, without trailing newlines. A trailing carriage
            return is preserved.
        tab_width: Columns per tab when measuring list indentation.

    Returns:
        A new list of lines. Lines that are not headers or list items are
        returned unchanged.
    """
    state = NumberingState()
    fixed: list[str] = []
    for line in lines:
        body, ending = _split_line_ending(line)
        fixed.append(_fix_line(body, state, tab_width) + ending)
    return fixed


def fix_numbering(text: str, *, tab_width: int = DEFAULT_TAB_WIDTH) -> NumberingResult:
    """
    Fix section and list numbering in a whole document.

    Never raises: any unexpected failure is returned as an unsuccessful
    `NumberingResult` with `lines_changed=0`.
    """
    try:
        lines = text.split("\n")
        fixed_lines = fix_numbering_in_lines(lines, tab_width=tab_width)
        return NumberingResult(
            success=True,
            lines_changed=count_changed_lines(lines, fixed_lines),
            fixed_text="\n".join(fixed_lines),
        )
    except Exception as e:
        return NumberingResult(
            success=False,
            lines_changed=0,
            error=ErrorInfo(
                ErrorCode.processing_error,
                f"Error fixing numbering: {error_message(e)}",
            ),
        )
