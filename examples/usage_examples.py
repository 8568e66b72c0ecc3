#!/usr/bin/env python3
"""
Example script showing how to use the lockfile-timeline library.
"""

from datetime import datetime
from pathlib import Path

from lockfile_timeline.git_storage import GitStorage
from lockfile_timeline.models import LockFormat
from lockfile_timeline.reporting import export_timeline_csv, print_timeline
from lockfile_timeline.timeline import TimelineBuilder, build_timeline


def example_basic_timeline():
    """Example: Timeline of a crate in the current repository."""
    print("="*60)
    print("Example 1: Basic Timeline")
    print("="*60)

    builder = TimelineBuilder(dependency="serde", lock_file="Cargo.lock")
    timeline = builder.build(progress=True)

    print_timeline(timeline, builder.dependency)


def example_bounded_timeline():
    """Example: Composer package over one year, exported to CSV."""
    print("\n" + "="*60)
    print("Example 2: Bounded Timeline with CSV Export")
    print("="*60)

    builder = TimelineBuilder(
        dependency="symfony/console",
        lock_file="composer.lock",
        since=datetime(2023, 1, 1),
        until=datetime(2023, 12, 31),
    )
    timeline = builder.build()

    print_timeline(timeline, builder.dependency)
    csv_file = export_timeline_csv(timeline, Path("./output"), builder.dependency)
    print(f"\nCSV saved to: {csv_file}")


def example_storage_api():
    """Example: Drive the assembler directly with a storage handle."""
    print("\n" + "="*60)
    print("Example 3: Storage API")
    print("="*60)

    storage = GitStorage.open(".")
    timeline = build_timeline(
        storage,
        "package-lock.json",
        LockFormat.NPM,
        "lodash",
        rev="main",
    )

    for entry in timeline:
        print(f"{entry.observed_at:%Y-%m-%d}  {entry.version}  {entry.commit_id[:8]}")


if __name__ == "__main__":
    import sys

    print("Lockfile Timeline - Example Usage")
    print("="*60)
    print("\nNOTE: Run these examples from the root of a git repository")
    print("that commits the corresponding lock files.")

    try:
        example_basic_timeline()
        example_bounded_timeline()
        example_storage_api()

        print("\n" + "="*60)
        print("Examples completed successfully!")
        print("="*60)

    except Exception as e:
        print(f"\nError running examples: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
