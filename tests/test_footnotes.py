"""Tests for footnote renumbering."""

from __future__ import annotations

from textwrap import dedent

from outlinemark.transforms.footnotes import (
    FootnoteDeclaration,
    create_footnote_number_map,
    find_footnote_declarations,
    process_footnotes,
    update_footnote_numbers,
)
from outlinemark.transforms.results import ErrorCode

SAMPLE_DOC = dedent(
    """\
    RFC Test Document
    -----------------
    Author        John Doe
    Date          2025-03-13
    Status        Draft

    This is a test document with footnotes[1].

    Here is another reference to a footnote[2].

    And here's a reference to the first footnote again[1].

    [1] This is the first footnote.
    [2] This is the second footnote."""
)

OUT_OF_ORDER_DOC = dedent(
    """\
    RFC Test Document
    -----------------
    Author        John Doe
    Date          2025-03-13
    Status        Draft

    This is a test document with footnotes[3].

    Here is another reference to a footnote[1].

    And here's a reference to another footnote[2].

    [3] This is the third footnote.
    [1] This is the first footnote.
    [2] This is the second footnote."""
)

NO_FOOTNOTES_DOC = dedent(
    """\
    RFC Test Document
    -----------------
    Author        John Doe

    This is a test document with no footnotes."""
)


def test_find_declarations():
    declarations = find_footnote_declarations(SAMPLE_DOC)
    assert [d.original_number for d in declarations] == ["1", "2"]
    assert declarations[0].text == "This is the first footnote."
    assert declarations[1].text == "This is the second footnote."
    assert declarations[0].position == SAMPLE_DOC.index("[1] This")
    assert declarations[0].position < declarations[1].position


def test_find_declarations_none():
    assert find_footnote_declarations(NO_FOOTNOTES_DOC) == []


def test_declarations_must_start_a_line():
    text = "Inline [1] mention\n [2] indented\n[3]no space\n[4] Real one"
    declarations = find_footnote_declarations(text)
    assert [d.original_number for d in declarations] == ["4"]


def test_number_map_follows_document_order():
    declarations = find_footnote_declarations(OUT_OF_ORDER_DOC)
    assert create_footnote_number_map(declarations) == {"3": "1", "1": "2", "2": "3"}


def test_number_map_duplicate_keeps_first():
    declarations = [
        FootnoteDeclaration(original_number="3", text="A", position=0),
        FootnoteDeclaration(original_number="3", text="B", position=10),
        FootnoteDeclaration(original_number="1", text="C", position=20),
    ]
    assert create_footnote_number_map(declarations) == {"3": "1", "1": "2"}


def test_update_numbers():
    declarations = find_footnote_declarations(OUT_OF_ORDER_DOC)
    new_text = update_footnote_numbers(OUT_OF_ORDER_DOC, create_footnote_number_map(declarations))
    assert "footnotes[1]." in new_text
    assert "a footnote[2]." in new_text
    assert "another footnote[3]." in new_text
    assert "[1] This is the third footnote." in new_text
    assert "[2] This is the first footnote." in new_text
    assert "[3] This is the second footnote." in new_text


def test_update_leaves_other_brackets_alone():
    text = "See [9], [x], [1a], [ 1], [12 and [1]"
    assert update_footnote_numbers(text, {"1": "5"}) == "See [9], [x], [1a], [ 1], [12 and [5]"


def test_update_swaps_in_one_pass():
    assert update_footnote_numbers("[1] and [2]", {"1": "2", "2": "1"}) == "[2] and [1]"


def test_process_reorders_out_of_order():
    text = dedent(
        """\
        Intro, see [5] and [2] for details.

        [5] Alpha
        [2] Beta
        """
    )
    result = process_footnotes(text)
    assert result.success
    assert result.new_text == dedent(
        """\
        Intro, see [1] and [2] for details.

        [1] Alpha
        [2] Beta
        """
    )
    assert result.footnotes_found == 2
    assert result.references_updated == 2


def test_process_unmapped_reference_untouched():
    result = process_footnotes("Cites [7] and [4].\n\n[4] Only one")
    assert result.new_text == "Cites [7] and [1].\n\n[1] Only one"


def test_process_duplicate_declarations():
    result = process_footnotes("[3] A\n[3] B\n[1] C")
    assert result.success
    assert result.new_text == "[1] A\n[1] B\n[2] C"


def test_process_no_footnotes():
    result = process_footnotes(NO_FOOTNOTES_DOC)
    assert result.success
    assert result.new_text == NO_FOOTNOTES_DOC
    assert result.footnotes_found == 0


def test_process_already_sequential_is_unchanged():
    result = process_footnotes(SAMPLE_DOC)
    assert result.success
    assert result.new_text == SAMPLE_DOC
    assert result.references_updated == 0


def test_process_idempotent():
    once = process_footnotes(OUT_OF_ORDER_DOC).new_text
    assert once is not None
    assert process_footnotes(once).new_text == once


def test_process_contiguous_numbers():
    text = "a[40] b[7] c[19]\n[40] x\n[19] y\n[7] z\n"
    result = process_footnotes(text)
    assert result.new_text is not None
    declarations = find_footnote_declarations(result.new_text)
    assert [d.original_number for d in declarations] == ["1", "2", "3"]
    assert [d.text for d in declarations] == ["x", "y", "z"]
    assert result.new_text.startswith("a[1] b[3] c[2]\n")


def test_non_ascii_digits_are_not_footnotes():
    assert find_footnote_declarations("[١] Arabic-Indic") == []
    result = process_footnotes("See [١] and [3].\n\n[3] Note")
    assert result.new_text == "See [١] and [1].\n\n[1] Note"
    assert result.references_updated == 2


def test_process_malformed_footnotes():
    text = "A malformed footnote[1.\n\n[1 Missing closing bracket"
    result = process_footnotes(text)
    assert result.success
    assert result.new_text == text


def test_process_errors_are_reported():
    result = process_footnotes(None)  # pyright: ignore[reportArgumentType]
    assert not result.success
    assert result.new_text is None
    assert result.error is not None
    assert result.error.code == ErrorCode.processing_error
