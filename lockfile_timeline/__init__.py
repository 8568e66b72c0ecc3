"""
Lock File Timeline

Reconstruct the version history of a single dependency from the git history
of a Cargo.lock, composer.lock or package-lock.json file.
"""

__version__ = "0.1.0"

from .cli import main
from .errors import LockfileTimelineError
from .models import LockFormat, Revision, VersionEntry
from .timeline import TimelineBuilder, build_timeline

__all__ = [
    "main",
    "build_timeline",
    "TimelineBuilder",
    "LockFormat",
    "Revision",
    "VersionEntry",
    "LockfileTimelineError",
]
