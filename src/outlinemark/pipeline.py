"""
The formatting pipeline: numbering, table of contents, then footnotes.

Each step is a pure text-to-result transform. A step that fails leaves the text
as it was and adds a warning; later steps still run. Summaries and warnings are
collected as data for the caller to report.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from outlinemark.transforms.footnotes import process_footnotes
from outlinemark.transforms.outline_numbering import DEFAULT_TAB_WIDTH, fix_numbering
from outlinemark.transforms.results import ErrorCode, NumberingResult
from outlinemark.transforms.toc import find_existing_toc, process_toc


class Step(str, Enum):
    """A formatting step. Steps always run in the order declared here."""

    numbering = "numbering"
    toc = "toc"
    footnotes = "footnotes"


ALL_STEPS: tuple[Step, ...] = (Step.numbering, Step.toc, Step.footnotes)


@dataclass
class PipelineResult:
    """Output of running the pipeline over one document."""

    original_text: str
    new_text: str

    summaries: list[str] = field(default_factory=list)
    """One line per step that ran successfully, e.g. "Fixed numbering: 3 lines changed"."""

    warnings: list[str] = field(default_factory=list)
    """Messages for steps that failed or had nothing to do."""

    @property
    def changed(self) -> bool:
        return self.new_text != self.original_text


def fix_numbering_outside_toc(text: str, *, tab_width: int = DEFAULT_TAB_WIDTH) -> NumberingResult:
    """
    Fix numbering with any existing TOC block held out.

    TOC entries look like section headers and would otherwise advance the
    section counters. The block is put back unchanged at its original position.
    """
    lines = text.split("\n")
    location = find_existing_toc(lines)
    if location is None:
        return fix_numbering(text, tab_width=tab_width)

    start, end = location.start_line, location.end_line
    outside = lines[:start] + lines[end + 1 :]
    result = fix_numbering("\n".join(outside), tab_width=tab_width)
    if result.success and result.fixed_text is not None:
        fixed = result.fixed_text.split("\n")
        result.fixed_text = "\n".join(fixed[:start] + lines[start : end + 1] + fixed[start:])
    return result


def format_document(
    text: str,
    steps: Iterable[Step] = ALL_STEPS,
    *,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> PipelineResult:
    """
    Run the enabled steps over a document, in pipeline order.

    Args:
        text: The full document text.
        steps: Which steps to run. Order is ignored; steps always run as
            numbering, then TOC, then footnotes.
        tab_width: Columns per tab when measuring list indentation.
    """
    enabled = set(steps)
    result = PipelineResult(original_text=text, new_text=text)
    current = text

    if Step.numbering in enabled:
        numbering = fix_numbering_outside_toc(current, tab_width=tab_width)
        if numbering.success and numbering.fixed_text is not None:
            current = numbering.fixed_text
            result.summaries.append(f"Fixed numbering: {numbering.lines_changed} lines changed")
        else:
            result.warnings.append(f"numbering: {numbering.error}")

    if Step.toc in enabled:
        toc = process_toc(current)
        if toc.success and toc.new_text is not None:
            current = toc.new_text
            result.summaries.append(f"Updated table of contents: {toc.sections_found} sections")
        elif toc.error and toc.error.code == ErrorCode.no_sections_found:
            result.warnings.append(f"toc: {toc.error} (skipped)")
        else:
            result.warnings.append(f"toc: {toc.error}")

    if Step.footnotes in enabled:
        footnotes = process_footnotes(current)
        if footnotes.success and footnotes.new_text is not None:
            current = footnotes.new_text
            if footnotes.footnotes_found:
                result.summaries.append(
                    f"Renumbered footnotes: {footnotes.footnotes_found} declarations, "
                    f"{footnotes.references_updated} numbers changed"
                )
        else:
            result.warnings.append(f"footnotes: {footnotes.error}")

    result.new_text = current
    return result
