"""
File-level API: read documents, run the formatting pipeline, write results.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from strif import atomic_output_file

from outlinemark.pipeline import ALL_STEPS, PipelineResult, Step, format_document
from outlinemark.transforms.outline_numbering import DEFAULT_TAB_WIDTH
from outlinemark.transforms.results import ErrorCode, ErrorInfo

SUPPORTED_SUFFIXES: tuple[str, ...] = (".rfc", ".txxt", ".txtx")

BACKUP_SUFFIX = ".orig"


def check_supported_file(path: str | Path) -> ErrorInfo | None:
    """Return an error if `path` does not have a supported document suffix."""
    if Path(path).suffix.lower() in SUPPORTED_SUFFIXES:
        return None
    suffixes = ", ".join(SUPPORTED_SUFFIXES)
    return ErrorInfo(
        ErrorCode.file_type_unsupported,
        f"Unsupported file type: {path} (expected one of {suffixes}; use --force to override)",
    )


def reformat_text(
    text: str,
    steps: Iterable[Step] = ALL_STEPS,
    *,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> PipelineResult:
    """Run the pipeline over a document string."""
    return format_document(text, steps, tab_width=tab_width)


def reformat_file(
    path: str,
    output: str = "-",
    *,
    inplace: bool = False,
    nobackup: bool = False,
    steps: Iterable[Step] = ALL_STEPS,
    tab_width: int = DEFAULT_TAB_WIDTH,
    force: bool = False,
    make_parents: bool = True,
) -> PipelineResult:
    """
    Reformat one document.

    Args:
        path: Input file, or "-" for stdin.
        output: Output file, or "-" for stdout. Ignored with `inplace`.
        inplace: Write the result back to `path`. Unchanged files are not rewritten.
        nobackup: With `inplace`, don't keep a `.orig` backup of the original.
        steps: Pipeline steps to run.
        tab_width: Columns per tab when measuring list indentation.
        force: Skip the supported file type check.
        make_parents: Create missing parent directories of `output`.

    Raises:
        ValueError: For `inplace` with stdin, or an unsupported file type.
    """
    if path == "-":
        if inplace:
            raise ValueError("Cannot use --inplace with stdin")
        text = sys.stdin.read()
    else:
        if not force:
            error = check_supported_file(path)
            if error:
                raise ValueError(error.message)
        text = Path(path).read_text(encoding="utf-8")

    result = reformat_text(text, steps, tab_width=tab_width)

    if inplace:
        if result.changed:
            backup_suffix = None if nobackup else BACKUP_SUFFIX
            with atomic_output_file(path, backup_suffix=backup_suffix) as tmp_path:
                Path(tmp_path).write_text(result.new_text, encoding="utf-8")
    elif output == "-":
        sys.stdout.write(result.new_text)
    else:
        with atomic_output_file(output, make_parents=make_parents) as tmp_path:
            Path(tmp_path).write_text(result.new_text, encoding="utf-8")

    return result


def reformat_files(
    files: Sequence[str],
    output: str = "-",
    *,
    inplace: bool = False,
    nobackup: bool = False,
    steps: Iterable[Step] = ALL_STEPS,
    tab_width: int = DEFAULT_TAB_WIDTH,
    force: bool = False,
    make_parents: bool = True,
) -> list[tuple[str, PipelineResult]]:
    """
    Reformat several documents. More than one file requires `inplace`, since
    all output would otherwise go to the same place.

    Returns:
        (path, result) pairs in input order.
    """
    if len(files) > 1 and not inplace:
        raise ValueError("Multiple files require --inplace")

    step_list = list(steps)
    results: list[tuple[str, PipelineResult]] = []
    for path in files:
        result = reformat_file(
            path,
            output,
            inplace=inplace,
            nobackup=nobackup,
            steps=step_list,
            tab_width=tab_width,
            force=force,
            make_parents=make_parents,
        )
        results.append((path, result))
    return results
