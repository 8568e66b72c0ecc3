"""
Command-line interface for the lock file timeline tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import LockFileNotDetected, LockfileTimelineError
from .git_storage import GitStorage
from .models import LockFormat
from .parsers import detect_format
from .reporting import export_timeline_csv, print_timeline, save_timeline_json
from .time_utils import parse_date
from .timeline import build_timeline


logger = logging.getLogger(__name__)

CANDIDATE_LOCK_FILES = [name for fmt in LockFormat for name in fmt.filenames]


def detect_lock_file(storage: GitStorage, rev: str = "HEAD") -> str:
    """Pick the first conventional lock file present in the repository root.

    The working tree is checked first, then the tree at ``rev``.
    """
    for name in CANDIDATE_LOCK_FILES:
        if (storage.root / name).is_file():
            logger.debug("Detected %s in working tree", name)
            return name
    for name in CANDIDATE_LOCK_FILES:
        if storage.read_blob(name, rev) is not None:
            logger.debug("Detected %s at %s", name, rev)
            return name
    raise LockFileNotDetected(
        f"No lock file found in {storage.root} (looked for {', '.join(CANDIDATE_LOCK_FILES)})"
    )


def _configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lockfile-timeline",
        description="Show how a dependency's locked version changed over a repository's history"
    )

    parser.add_argument(
        "dependency",
        help="Exact name of the dependency to track (e.g. serde, symfony/console, lodash)"
    )

    parser.add_argument(
        "--lock-file",
        default=None,
        help="Lock file path relative to --repo. Default: auto-detect"
    )

    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in LockFormat],
        default=None,
        help="Lock file format. Default: inferred from the file name"
    )

    parser.add_argument(
        "--repo",
        default=".",
        help="Path inside the git repository. Default: current directory"
    )

    parser.add_argument(
        "--rev",
        default="HEAD",
        help="Revision whose history is walked. Default: HEAD"
    )

    parser.add_argument(
        "--since",
        default=None,
        help="Ignore commits before this date (YYYY-MM-DD or ISO 8601)"
    )

    parser.add_argument(
        "--until",
        default=None,
        help="Ignore commits after this date (YYYY-MM-DD or ISO 8601)"
    )

    parser.add_argument(
        "--output-dir",
        default="./output",
        help="Output directory for --json and --csv exports. Default: ./output"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Also save the timeline as JSON"
    )

    parser.add_argument(
        "--csv",
        action="store_true",
        help="Also save the timeline as CSV"
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while walking history"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose, args.quiet)

    since = until = None
    if args.since:
        since = parse_date(args.since)
        if since is None:
            parser.error("Invalid --since date. Use YYYY-MM-DD or ISO 8601")
    if args.until:
        until = parse_date(args.until, end_of_day=True)
        if until is None:
            parser.error("Invalid --until date. Use YYYY-MM-DD or ISO 8601")

    try:
        storage = GitStorage.open(args.repo)
        if args.lock_file:
            path = storage.relative_path(args.lock_file, base=args.repo)
        else:
            path = detect_lock_file(storage, args.rev)
        fmt = LockFormat(args.format) if args.format else detect_format(path)

        logger.info("Tracking %s in %s (%s)", args.dependency, path, fmt.value)
        timeline = build_timeline(
            storage,
            path,
            fmt,
            args.dependency,
            rev=args.rev,
            since=since,
            until=until,
            progress=args.progress,
        )
    except LockfileTimelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_timeline(timeline, args.dependency)

    output_dir = Path(args.output_dir)
    if args.json:
        results_file = save_timeline_json(timeline, output_dir, args.dependency)
        print(f"\nResults saved to: {results_file}")
    if args.csv:
        csv_file = export_timeline_csv(timeline, output_dir, args.dependency)
        print(f"CSV saved to: {csv_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
