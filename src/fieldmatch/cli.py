"""CLI entry point for FieldMatch."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from fieldmatch import __version__, logger
from fieldmatch.dependencies import ensure_cli_dependencies_for_compare
from fieldmatch.exceptions import PackageError
from fieldmatch.logging import configure_logging
from fieldmatch.settings import Settings, get_settings

if TYPE_CHECKING:
    from fieldmatch.session import ComparisonSession


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="fieldmatch")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    compare_parser = subparsers.add_parser(
        "compare",
        help="Locate schema fields in a PDF/DOCX/TXT document and validate them",
    )
    compare_parser.add_argument("--schema", required=True, type=Path, dest="schema_path")
    compare_parser.add_argument("--document", required=True, type=Path, dest="document_path")
    compare_parser.add_argument("--ocr", action="store_true", dest="use_ocr", help="OCR scanned PDF pages")
    compare_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        dest="output_path",
        help="Write the JSON report here instead of stdout (relative to RESULTS_DIR)",
    )
    compare_parser.add_argument(
        "--render-page",
        type=Path,
        default=None,
        dest="render_path",
        help="Render the first matched PDF page with keyword highlights to this PNG",
    )

    return parser


def _report_metadata(session: ComparisonSession) -> dict[str, object]:
    """Describe the compared schema and document for the JSON report.

    Args:
        session (ComparisonSession): Session after a comparison.

    Returns:
        dict[str, object]: Report metadata.
    """
    schema = session.schema
    document = session.document
    return {
        "schema_name": schema.name if schema else None,
        "schema_version": schema.version if schema else None,
        "document": str(document.source) if document else None,
        "document_kind": document.kind.value if document else None,
        "pages": len(session.pages),
        "ocr": document.used_ocr if document else False,
        "active_page_index": session.active_page_index,
    }


def _resolve_output_path(path: Path, settings: Settings) -> Path:
    """Place relative output paths under the configured results directory.

    Args:
        path (Path): Path given on the command line.
        settings (Settings): Runtime settings.

    Returns:
        Path: Absolute paths unchanged, relative ones under `RESULTS_DIR`.
    """
    if path.is_absolute():
        return path
    return Path(settings.results_dir) / path


def _run_compare(args: argparse.Namespace, settings: Settings) -> int:
    """Run the `compare` command.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    from fieldmatch.comparator import persist_report, report_to_json  # noqa: PLC0415
    from fieldmatch.pdf_render import render_page_png  # noqa: PLC0415
    from fieldmatch.session import ComparisonSession  # noqa: PLC0415

    session = ComparisonSession(settings=settings)
    session.load_schema(args.schema_path)
    session.load_document(args.document_path, use_ocr=args.use_ocr)
    report = session.run_compare()
    metadata = _report_metadata(session)

    if args.output_path is None:
        sys.stdout.write(report_to_json(report, metadata=metadata) + "\n")
    else:
        output_path = _resolve_output_path(args.output_path, settings)
        persist_report(report, output_path, metadata=metadata)
        logger.info("Comparison report written", extra={"output_path": str(output_path)})

    if args.render_path is not None:
        if session.document is not None and session.document.is_pdf:
            page = session.pages[session.active_page_index]
            render_page_png(
                session.document.source,
                session.active_page_index,
                scale=page.viewport.scale,
                boxes=session.active_highlights(),
                output_path=_resolve_output_path(args.render_path, settings),
            )
        else:
            logger.warning("Page rendering skipped: document is not a PDF")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, `sys.argv[1:]` by default.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "compare":
        parser.print_help()
        return 0

    try:
        ensure_cli_dependencies_for_compare()
        return _run_compare(args, settings)
    except PackageError:
        logger.exception("Comparison failed")
        return 1
    except KeyboardInterrupt:
        logger.info("Comparison aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error during comparison")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
