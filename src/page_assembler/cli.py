"""
Module: cli

Purpose:
    Command-line interface. Imports one or more batches of PDFs and
    images, optionally edits a selection, and exports a single PDF.

Example:
    page-assembler report.pdf --pages 2-4 \\
        --add cover.png --mode prepend \\
        --select 2 --rotate 90 \\
        --output-dir out --name merged

Exit codes:
    0 success, 1 assembly error, 2 usage error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from page_assembler import __version__
from page_assembler.assembler import AssemblyConfig, Edge, InsertionMode, ProgressEvent, Workspace
from page_assembler.core.errors import AssemblyError
from page_assembler.core.models import SourceAsset

logger = logging.getLogger("page_assembler")

EXIT_OK = 0
EXIT_ASSEMBLY_ERROR = 1
EXIT_USAGE_ERROR = 2


def _insertion_mode(text: str) -> InsertionMode:
    try:
        return InsertionMode.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="page-assembler",
        description="Combine pages from PDFs and images into one PDF",
    )
    parser.add_argument("sources", nargs="+", type=Path,
                        help="PDF or image files forming the first batch")
    parser.add_argument("--pages", default="all",
                        help='Page range for a single-document first batch, e.g. "1-3, 7"')
    parser.add_argument("--add", action="append", nargs="+", type=Path, default=[],
                        metavar="FILE", help="Another batch of files (repeatable)")
    parser.add_argument("--mode", type=_insertion_mode, default=InsertionMode.APPEND,
                        help="How --add batches merge: append, prepend, interleave, after-index")
    parser.add_argument("--after", type=float, default=1,
                        help="1-based page count to keep in front for after-index")
    parser.add_argument("--select", metavar="RANGE",
                        help="Select output positions before editing")
    parser.add_argument("--rotate", type=int, metavar="DEG",
                        help="Rotate the selection clockwise (multiple of 90)")
    parser.add_argument("--move-to", choices=[str(e) for e in Edge],
                        help="Move the selection to the start or end")
    parser.add_argument("--delete", action="store_true",
                        help="Delete the selection")
    parser.add_argument("--output-dir", "-o", type=Path, default=Path.cwd(),
                        help="Directory for the output PDF")
    parser.add_argument("--name", help="Output file name (default: master_document)")
    parser.add_argument("--manifest", action="store_true",
                        help="Write a JSON manifest next to the PDF")
    parser.add_argument("--overwrite", action="store_true",
                        help="Replace an existing output instead of renaming")
    parser.add_argument("--thumbnails", type=Path, metavar="DIR",
                        help="Write JPEG previews of the final order to DIR")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load(paths: Sequence[Path], parser: argparse.ArgumentParser) -> List[SourceAsset]:
    sources = []
    for path in paths:
        if not path.is_file():
            parser.error(f"File not found: {path}")
        sources.append(SourceAsset.from_path(path))
    return sources


def _report_progress(event: ProgressEvent) -> None:
    logger.debug(event.message)


def _write_thumbnails(workspace: Workspace, directory: Path) -> int:
    directory.mkdir(parents=True, exist_ok=True)
    written = 0
    for position, node in enumerate(workspace.store, start=1):
        if node.preview is None:
            continue
        preview = node.preview.rotate(-node.rotation, expand=True) if node.rotation else node.preview
        path = directory / f"{position:03d}_{node.id}.jpg"
        path.write_bytes(workspace.decoder.encode_preview(preview))
        written += 1
    return written


def run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Run one assembly from parsed arguments."""
    if args.rotate is not None and args.rotate % 90 != 0:
        parser.error(f"--rotate must be a multiple of 90: {args.rotate}")
    if (args.rotate is not None or args.move_to or args.delete) and not args.select:
        parser.error("--rotate, --move-to and --delete need --select")

    first_batch = _load(args.sources, parser)
    extra_batches = [_load(batch, parser) for batch in args.add]

    config = AssemblyConfig(write_manifest=args.manifest, overwrite=args.overwrite)
    workspace = Workspace(config)

    result = workspace.add_sources(first_batch, page_range=args.pages, progress=_report_progress)
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    for batch in extra_batches:
        result = workspace.add_sources(
            batch, mode=args.mode, target=args.after, progress=_report_progress
        )
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

    if args.select:
        workspace.selection_engine.select_range(args.select)
        if args.rotate:
            workspace.rotate_selected(args.rotate)
        if args.move_to:
            workspace.move_selected(args.move_to)
        if args.delete:
            workspace.delete_selected()

    if args.thumbnails is not None:
        count = _write_thumbnails(workspace, args.thumbnails)
        logger.info(f"Wrote {count} thumbnails to {args.thumbnails}")

    export = workspace.export(args.output_dir, args.name)
    for warning in export.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    print(f"Wrote {export.page_count} pages to {export.output_path}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return run(args, parser)
    except AssemblyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ASSEMBLY_ERROR


if __name__ == "__main__":
    sys.exit(main())
