#!/usr/bin/env python3
"""
Outlinemark: Consistent numbering for plain-text outline documents

Fixes section and list numbering, regenerates the table of contents and
renumbers footnotes in .rfc / .txxt documents.

Common usage:
  outlinemark doc.rfc                 # print the fixed document
  outlinemark -i doc.rfc              # fix in place (keeps doc.rfc.orig)
  outlinemark -i --nobackup docs/     # fix every document under docs/
  outlinemark --footnotes -i doc.rfc  # only renumber footnotes
  outlinemark --list-files .
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from outlinemark.config import find_config_file, load_config, merge_cli_with_config
from outlinemark.file_resolver import FileResolver, FileResolverConfig, has_glob_chars
from outlinemark.pipeline import ALL_STEPS, Step
from outlinemark.reformat_api import check_supported_file, reformat_files
from outlinemark.transforms.outline_numbering import DEFAULT_TAB_WIDTH


@dataclass
class Options:
    """Command-line options for the outlinemark tool."""

    files: list[str]
    output: str
    inplace: bool
    nobackup: bool
    numbering: bool
    footnotes: bool
    toc: bool
    tab_width: int
    force: bool
    quiet: bool
    version: bool
    # File discovery options
    include: list[str] | None
    extend_include: list[str]
    exclude: list[str] | None
    extend_exclude: list[str]
    respect_gitignore: bool
    list_files: bool
    files_max_size: int

    @property
    def steps(self) -> list[Step]:
        return [step for step in ALL_STEPS if getattr(self, step.value)]


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    doc_parts = (__doc__ or "").split("\n\n")
    parser = argparse.ArgumentParser(
        description=doc_parts[0],
        epilog="\n\n".join(doc_parts[1:]),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input files, directories or globs ('-' for stdin, '.' for current directory)",
    )
    parser.add_argument(
        "-o", "--output", type=str, default="-", help="Output file (use '-' for stdout)"
    )
    parser.add_argument(
        "-i", "--inplace", action="store_true", help="Edit files in place (ignores --output)"
    )
    parser.add_argument(
        "--nobackup",
        action="store_true",
        help="Do not keep a .orig backup of the original file when using --inplace",
    )
    # Step selection. Tracked defaults are None so explicit flags can be told
    # apart from defaults when merging with the config file.
    parser.add_argument(
        "--numbering",
        action="store_true",
        default=None,
        help="Fix section and list numbering",
    )
    parser.add_argument(
        "--toc", action="store_true", default=None, help="Add or update the table of contents"
    )
    parser.add_argument(
        "--footnotes", action="store_true", default=None, help="Renumber footnotes"
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Run all steps (the default when no step is selected)",
    )
    parser.add_argument(
        "--tab-width",
        type=int,
        default=None,
        metavar="N",
        help=f"Columns per tab when measuring list indentation (default: {DEFAULT_TAB_WIDTH})",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Process named files even if their extension is not .rfc, .txxt or .txtx",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Don't report changes on stderr"
    )
    # File discovery options
    parser.add_argument(
        "--extend-include",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Additional file patterns to include (e.g., '*.txt'). Can be repeated",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace all default exclusion patterns. Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Add to default exclusion patterns (e.g., 'drafts/'). Can be repeated",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_true",
        default=None,
        dest="no_respect_gitignore",
        help="Disable .gitignore integration",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved file paths without formatting",
    )
    parser.add_argument(
        "--files-max-size",
        type=int,
        default=None,
        dest="files_max_size",
        metavar="BYTES",
        help="Skip files larger than this size in bytes (0 = no limit, default: 1048576)",
    )
    parser.add_argument(
        "--version", action="store_true", help="Show version information and exit"
    )
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns the options and the set of option names the user set explicitly
    (these take precedence over the config file).
    """
    opts = _build_parser().parse_args(args)

    explicit_flags: set[str] = set()
    for name in (
        "tab_width",
        "extend_include",
        "exclude",
        "extend_exclude",
        "files_max_size",
    ):
        if getattr(opts, name) is not None:
            explicit_flags.add(name)
    if opts.no_respect_gitignore is not None:
        explicit_flags.add("respect_gitignore")

    # Selecting any step (or --all) fixes the step set; otherwise all steps run
    # unless the config file turns some off.
    selected = {step.value for step in ALL_STEPS if getattr(opts, step.value)}
    if opts.all:
        selected = {step.value for step in ALL_STEPS}
    if selected:
        explicit_flags.update(step.value for step in ALL_STEPS)
    else:
        selected = {step.value for step in ALL_STEPS}

    options = Options(
        files=opts.files,
        output=opts.output,
        inplace=opts.inplace,
        nobackup=opts.nobackup,
        numbering=Step.numbering.value in selected,
        footnotes=Step.footnotes.value in selected,
        toc=Step.toc.value in selected,
        tab_width=opts.tab_width if opts.tab_width is not None else DEFAULT_TAB_WIDTH,
        force=opts.force,
        quiet=opts.quiet,
        version=opts.version,
        include=None,
        extend_include=opts.extend_include or [],
        exclude=opts.exclude,
        extend_exclude=opts.extend_exclude or [],
        respect_gitignore=not opts.no_respect_gitignore,
        list_files=opts.list_files,
        files_max_size=opts.files_max_size if opts.files_max_size is not None else 1_048_576,
    )
    return options, explicit_flags


def _needs_file_resolution(files: list[str]) -> bool:
    """Check if any input paths are directories or globs."""
    return any(f != "-" and (Path(f).is_dir() or has_glob_chars(f)) for f in files)


def _resolve_files(options: Options) -> list[str]:
    """
    Expand directories and globs with the file resolver. Plain file paths and
    '-' pass through unchanged.
    """
    if not _needs_file_resolution(options.files) and not options.list_files:
        return options.files

    config = FileResolverConfig(
        extend_include=options.extend_include,
        exclude=options.exclude,
        extend_exclude=options.extend_exclude,
        respect_gitignore=options.respect_gitignore,
        files_max_size=options.files_max_size,
    )
    if options.include is not None:
        config.include = options.include

    resolvable = [f for f in options.files if f != "-"]
    result = [str(p) for p in FileResolver(config).resolve(resolvable)]
    if len(resolvable) < len(options.files):
        result.insert(0, "-")
    return result


def _check_named_files(options: Options) -> str | None:
    """Return an error message for an explicitly named file with an unsupported type."""
    if options.force:
        return None
    for f in options.files:
        if f == "-" or has_glob_chars(f) or Path(f).is_dir():
            continue
        error = check_supported_file(f)
        if error:
            return error.message
    return None


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the outlinemark CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage errors, 2 for other errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            print(f"v{importlib.metadata.version('outlinemark')}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.files:
        print(
            "Error: No input specified. Provide files, directories (use '.' for current"
            " directory), or '-' for stdin. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.tab_width <= 0:
        print("Error: --tab-width must be a positive integer", file=sys.stderr)
        return 1

    try:
        resolved_files = _resolve_files(options)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.list_files:
        for f in resolved_files:
            print(f)
        return 0

    if not options.steps:
        print("Error: All steps are disabled; nothing to do", file=sys.stderr)
        return 1

    named_file_error = _check_named_files(options)
    if named_file_error:
        print(f"Error: {named_file_error}", file=sys.stderr)
        return 1

    try:
        results = reformat_files(
            files=resolved_files,
            output=options.output,
            inplace=options.inplace,
            nobackup=options.nobackup,
            steps=options.steps,
            tab_width=options.tab_width,
            # Discovered files already matched the include patterns.
            force=True,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not options.quiet:
        for path, result in results:
            label = "<stdin>" if path == "-" else path
            for summary in result.summaries:
                print(f"{label}: {summary}", file=sys.stderr)
            for warning in result.warnings:
                print(f"{label}: warning: {warning}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
