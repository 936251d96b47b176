"""Command-line interface for mdtangle.

This module provides the ``mdtangle`` command, which tangles the Markdown
documents of a project into source files.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from mdtangle.config import Config
from mdtangle.context import (
    Context,
    execute_transaction,
    tangle_documents,
    tangle_files,
)
from mdtangle.document import Document
from mdtangle.errors import ConfigError, TangleError


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def get_context(
    config_path: Optional[str],
    directory: Optional[str],
    language: Optional[str] = None,
) -> Context:
    """Create a Context from CLI options."""
    base_dir = directory or os.getcwd()

    if config_path:
        config = Config.from_file(config_path)
    else:
        config = Config.from_dir(base_dir)

    if language:
        config.language = language

    return Context(config=config, base_dir=base_dir)


def cmd_tangle(args: argparse.Namespace) -> int:
    """Execute the tangle command."""
    try:
        context = get_context(args.config, args.project or args.directory, args.language)

        if args.files:
            report = tangle_files(context, args.files, jobs=args.jobs)
        else:
            report = tangle_documents(context, jobs=args.jobs)

        for path, warning in report.warnings:
            print(f"Warning: {path}: {warning}", file=sys.stderr)

        transaction = report.transaction
        if transaction.is_empty() and report.ok:
            print("No files to tangle.")
            return 0

        if args.dry_run:
            print(f"Would perform {len(transaction)} actions:")
            for desc in transaction.describe():
                print(f"  {desc}")
            if args.diff:
                for diff in transaction.diffs():
                    sys.stdout.write(diff)
        else:
            written = execute_transaction(transaction, force=args.force, report=report)
            print(f"Tangled {len(written)} files.")

        for _, error in report.failures:
            print(f"Error: {error}", file=sys.stderr)

        if not report.ok:
            print(f"{len(report.failures)} documents failed.", file=sys.stderr)
            return 1
        return 0

    except (ConfigError, TangleError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_expand(args: argparse.Namespace) -> int:
    """Print the expansion of a single document."""
    try:
        context = get_context(args.config, args.directory, args.language)
        document = Document.load(context.resolve_path(args.file), context.config)
        sys.stdout.write(document.tangle())
        return 0

    except (ConfigError, TangleError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_list(args: argparse.Namespace) -> int:
    """List the fragments defined in a document."""
    try:
        context = get_context(args.config, args.directory, args.language)
        document = Document.load(context.resolve_path(args.file), context.config)

        roots = set(document.roots())
        for fragment in document.fragments():
            marker = " (root)" if fragment.name in roots else ""
            print(f"{fragment.name}{marker}")
        return 0

    except (ConfigError, TangleError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_status(args: argparse.Namespace) -> int:
    """Execute the status command."""
    try:
        context = get_context(args.config, args.directory, args.language)

        source_files = context.source_files()
        print(f"Source files: {len(source_files)}")

        if args.status_verbose:
            for f in source_files:
                print(f"  {f}")

        targets = []
        for path in source_files:
            try:
                doc = Document.load(path, context.config)
            except TangleError as e:
                print(f"Error: {e}", file=sys.stderr)
                continue
            target = doc.output_path()
            if target is not None:
                targets.append(target)

        print(f"\nTarget files: {len(targets)}")

        if args.status_verbose:
            for t in targets:
                state = "" if Path(t).exists() else " (missing)"
                print(f"  {t}{state}")
        return 0

    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mdtangle",
        description="mdtangle - Tangle literate Markdown documents into source files",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Configuration file path",
    )
    parser.add_argument(
        "-C", "--directory",
        metavar="DIR",
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "-l", "--language",
        metavar="LANG",
        help="Language tag of the code blocks to tangle (default: rust)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # tangle
    p_tangle = subparsers.add_parser(
        "tangle",
        help="Write the expanded root fragment of each document",
    )
    p_tangle.add_argument(
        "-f", "--force",
        action="store_true",
        help="Rewrite output files even if unchanged",
    )
    p_tangle.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Show what would be done",
    )
    p_tangle.add_argument(
        "-d", "--diff",
        action="store_true",
        help="With --dry-run, show a unified diff of each output file",
    )
    p_tangle.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        metavar="N",
        help="Number of documents to process in parallel (default: 1)",
    )
    p_tangle.add_argument(
        "-p", "--project",
        metavar="DIR",
        help="Project directory, same as -C",
    )
    p_tangle.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Specific documents to tangle",
    )
    p_tangle.set_defaults(func=cmd_tangle)

    # expand
    p_expand = subparsers.add_parser(
        "expand",
        help="Print the expansion of one document",
    )
    p_expand.add_argument("file", metavar="FILE", help="Markdown document")
    p_expand.set_defaults(func=cmd_expand)

    # list
    p_list = subparsers.add_parser(
        "list",
        help="List the fragments of one document",
    )
    p_list.add_argument("file", metavar="FILE", help="Markdown document")
    p_list.set_defaults(func=cmd_list)

    # status
    p_status = subparsers.add_parser(
        "status",
        help="Show source documents and their targets",
    )
    p_status.add_argument(
        "-v", "--verbose",
        dest="status_verbose",
        action="store_true",
        help="Show detailed output",
    )
    p_status.set_defaults(func=cmd_status)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
