from outlinemark.pipeline import ALL_STEPS, PipelineResult, Step, format_document
from outlinemark.reformat_api import reformat_file, reformat_files, reformat_text
from outlinemark.transforms.footnotes import process_footnotes
from outlinemark.transforms.outline_numbering import fix_numbering, fix_numbering_in_lines
from outlinemark.transforms.results import count_changed_lines
from outlinemark.transforms.toc import process_toc

__all__ = [
    "ALL_STEPS",
    "PipelineResult",
    "Step",
    "count_changed_lines",
    "fix_numbering",
    "fix_numbering_in_lines",
    "format_document",
    "process_footnotes",
    "process_toc",
    "reformat_file",
    "reformat_files",
    "reformat_text",
]
