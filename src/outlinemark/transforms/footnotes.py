"""
Footnote renumbering for plain-text outline documents.

A footnote declaration is a line of the form `[<number>] <text>`. Any other
`[<number>]` token in the text is a reference. Renumbering:

1. Collects declarations in document order (by position, not by their
   current number, which may be out of order).
2. Assigns new numbers 1, 2, 3, ... in that order.
3. Rewrites every `[<number>]` token whose number was declared, in a single
   left-to-right scan. Declarations and references share the same token shape
   and are treated alike. Tokens with undeclared numbers are left untouched.

All other text, spacing and line breaks are copied verbatim.

EXAMPLE
-------
Input:
    See [5] and [2].
    [5] Alpha
    [2] Beta

Output:
    See [1] and [2].
    [1] Alpha
    [2] Beta
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from outlinemark.transforms.results import ErrorCode, ErrorInfo, FootnoteResult, error_message

_FOOTNOTE_DECLARATION = re.compile(r"^\[([0-9]+)\] (.+)$", re.MULTILINE)


@dataclass
class FootnoteDeclaration:
    """A `[n] text` line found in a document."""

    original_number: str
    """The number as written, e.g. "5" (kept as text so "05" and "5" differ)."""

    text: str
    """The footnote body after the bracketed number."""

    position: int
    """Character offset of the declaration, used only for ordering."""


def find_footnote_declarations(text: str) -> list[FootnoteDeclaration]:
    """
    Find all footnote declarations in the text, sorted by position.
    """
    declarations = [
        FootnoteDeclaration(original_number=m.group(1), text=m.group(2), position=m.start())
        for m in _FOOTNOTE_DECLARATION.finditer(text)
    ]
    return sorted(declarations, key=lambda d: d.position)


def create_footnote_number_map(declarations: Iterable[FootnoteDeclaration]) -> dict[str, str]:
    """
    Map original footnote numbers to new sequential numbers.

    Numbers are assigned in the order given. A number declared more than once
    keeps the new number of its first declaration, so the result is always
    1..k for k distinct original numbers.
    """
    number_map: dict[str, str] = {}
    for declaration in declarations:
        if declaration.original_number not in number_map:
            number_map[declaration.original_number] = str(len(number_map) + 1)
    return number_map


def _is_ascii_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _rewrite_footnote_numbers(text: str, number_map: dict[str, str]) -> tuple[str, int]:
    parts: list[str] = []
    last_index = 0
    updated = 0
    i = 0
    length = len(text)

    while i < length:
        if text[i] == "[" and i + 1 < length and _is_ascii_digit(text[i + 1]):
            j = i + 1
            while j < length and _is_ascii_digit(text[j]):
                j += 1
            if j < length and text[j] == "]":
                new_number = number_map.get(text[i + 1 : j])
                if new_number is not None:
                    parts.append(text[last_index:i])
                    parts.append(f"[{new_number}]")
                    if new_number != text[i + 1 : j]:
                        updated += 1
                    last_index = j + 1
                    i = j + 1
                    continue
        i += 1

    parts.append(text[last_index:])
    return "".join(parts), updated


def update_footnote_numbers(text: str, number_map: dict[str, str]) -> str:
    """
    Replace the number inside every `[<digits>]` token found in `number_map`.

    Tokens whose digits are not in the map, and everything outside the brackets,
    are copied unchanged.
    """
    new_text, _ = _rewrite_footnote_numbers(text, number_map)
    return new_text


def process_footnotes(text: str) -> FootnoteResult:
    """
    Renumber all footnotes in a document sequentially and update references.

    Never raises. A document without declarations is returned unchanged with
    `success=True`.
    """
    try:
        declarations = find_footnote_declarations(text)
        if not declarations:
            return FootnoteResult(success=True, new_text=text)

        number_map = create_footnote_number_map(declarations)
        new_text, updated = _rewrite_footnote_numbers(text, number_map)

        return FootnoteResult(
            success=True,
            new_text=new_text,
            footnotes_found=len(declarations),
            references_updated=updated,
        )
    except Exception as e:
        return FootnoteResult(
            success=False,
            error=ErrorInfo(
                ErrorCode.processing_error,
                f"Error processing footnotes: {error_message(e)}",
            ),
        )
