"""
threemf_profiles CLI — Validate 3MF packages and extract their print profiles.

Usage:
    threemf-profiles <command> [options]
    python -m threemf_profiles <command> [options]
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from threemf_profiles import ProfileExtractor

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="threemf-profiles",
        description="3MF package validation and print-profile extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  threemf-profiles validate benchy.3mf
  threemf-profiles extract benchy.3mf calibration_cube.3mf
  threemf-profiles extract models/*.3mf --json --thumbnail-dir previews
  threemf-profiles thumbnail benchy.3mf benchy.png

Environment variables:
  THREEMF_PROFILES_THUMBNAIL_DIR   Default for extract --thumbnail-dir
        """,
    )

    parser.add_argument(
        "--verbose", "-V", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress non-error output (logging only)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True,
        metavar="<command>",
    )

    # --- validate ---
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check that files are structurally valid 3MF packages",
    )
    validate_parser.add_argument("files", nargs="+", type=Path, help="Package files")
    validate_parser.add_argument(
        "--json", action="store_true", help="Output results as JSON"
    )
    validate_parser.set_defaults(func=run_validate)

    # --- extract ---
    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract print settings and metadata from packages",
    )
    extract_parser.add_argument("files", nargs="+", type=Path, help="Package files")
    extract_parser.add_argument(
        "--json", action="store_true", help="Output full results as JSON"
    )
    extract_parser.add_argument(
        "--thumbnail-dir",
        type=Path,
        default=None,
        help="Also write each package's preview image here "
             "(default: $THREEMF_PROFILES_THUMBNAIL_DIR, unset = skip)",
    )
    extract_parser.set_defaults(func=run_extract)

    # --- thumbnail ---
    thumb_parser = subparsers.add_parser(
        "thumbnail",
        help="Write a package's embedded preview image to a file",
    )
    thumb_parser.add_argument("file", type=Path, help="Package file")
    thumb_parser.add_argument("output", type=Path, help="Output image path")
    thumb_parser.set_defaults(func=run_thumbnail)

    return parser


def _default_thumbnail_dir() -> Path | None:
    """Return the thumbnail directory from env, if set."""
    value = os.environ.get("THREEMF_PROFILES_THUMBNAIL_DIR")
    return Path(value) if value else None


def _make_reporter(use_json: bool):
    """Create the appropriate progress reporter."""
    from threemf_profiles.progress import RichProgressReporter, NullProgressReporter
    return NullProgressReporter() if use_json else RichProgressReporter()


def run_validate(args: argparse.Namespace) -> int:
    """Execute the validate command."""
    extractor = ProfileExtractor()
    results = {str(path): extractor.validate(path) for path in args.files}

    if args.json:
        print(json.dumps(
            {path: r.model_dump(exclude_none=True) for path, r in results.items()},
            indent=2,
        ))
    elif not args.quiet:
        for path, r in results.items():
            status = "OK" if r.valid else f"INVALID: {r.reason}"
            print(f"{path}: {status}")

    return 0 if all(r.valid for r in results.values()) else 1


def run_extract(args: argparse.Namespace) -> int:
    """Execute the extract command."""
    extractor = ProfileExtractor()
    reporter = _make_reporter(args.json or args.quiet)
    thumbnail_dir = args.thumbnail_dir or _default_thumbnail_dir()
    if thumbnail_dir:
        thumbnail_dir.mkdir(parents=True, exist_ok=True)

    total = len(args.files)
    reporter.update_status(f"Extracting {total} package(s)...")

    output = {}
    failed = 0
    for i, path in enumerate(args.files, 1):
        reporter.step(path.name, i, total)
        result = extractor.extract(path)
        entry = result.model_dump()
        entry["summary"] = result.summary()

        if result.error and not result.settings and not result.metadata:
            failed += 1
            reporter.warn(result.error)
        elif result.error:
            reporter.warn(f"Degraded: {result.error}")

        if thumbnail_dir and result.thumbnail_entry_name:
            suffix = Path(result.thumbnail_entry_name).suffix.lower()
            target = thumbnail_dir / f"{path.stem}{suffix}"
            entry["thumbnail_path"] = (
                str(target) if extractor.extract_thumbnail(path, target) else None
            )

        output[str(path)] = entry

    if args.json:
        print(json.dumps(output, indent=2, ensure_ascii=False))
    elif not args.quiet:
        for path, entry in output.items():
            print(f"\n{path}")
            if entry["error"]:
                print(f"  Error: {entry['error']}")
            print(f"  Objects:   {entry['model_count']}")
            print(f"  Settings:  {len(entry['settings'])}")
            print(f"  Metadata:  {len(entry['metadata'])}")
            print(f"  Thumbnail: {entry['thumbnail_entry_name'] or '-'}")
            for key, value in entry["summary"].items():
                print(f"    {key}: {value}")

    return 1 if failed else 0


def run_thumbnail(args: argparse.Namespace) -> int:
    """Execute the thumbnail command."""
    extractor = ProfileExtractor()
    if not extractor.extract_thumbnail(args.file, args.output):
        logger.error("No thumbnail written for %s", args.file)
        return 1
    if not args.quiet:
        print(f"Wrote {args.output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging
    if getattr(args, "verbose", False):
        log_level = logging.DEBUG
    elif getattr(args, "quiet", False):
        log_level = logging.ERROR
    else:
        log_level = logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if hasattr(args, "func"):
        try:
            return args.func(args)
        except KeyboardInterrupt:
            logger.error("Interrupted")
            return 1
        except Exception as e:
            logger.error("%s", e)
            if getattr(args, "verbose", False):
                logger.debug("Traceback:", exc_info=True)
            return 1
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
