from __future__ import annotations

"""
Scan Domain Data Models.

Defines the immutable run options, the report line emitted for every
visible node, and the summary returned to the interface layer once all
roots have been walked.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List

from rdu.core.services.formatter import format_size

# -----------------------------------------------------------------------------
# DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_MAX_DEPTH: int = 3
DEFAULT_THRESHOLD: int = 0


def default_jobs() -> int:
    """Size the worker pool after the available hardware parallelism."""
    return os.cpu_count() or 1


# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Options:
    """
    Read-only configuration for one run.

    Shared by reference across every recursive call and every concurrent
    branch of the walker.

    Attributes:
        max_depth: Deepest reportable depth (root is 0). Negative values
                   suppress all output.
        threshold: A node is reportable only if its size is strictly greater.
        human_readable: Select the unit-suffixed size format.
        jobs: Worker pool size. 1 selects the sequential walker.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    threshold: int = DEFAULT_THRESHOLD
    human_readable: bool = False
    jobs: int = 1

    @property
    def parallel(self) -> bool:
        return self.jobs > 1

    def is_visible(self, size: int, depth: int) -> bool:
        """Apply the depth-then-threshold visibility filter to a node."""
        return self.max_depth - depth >= 0 and size > self.threshold


@dataclass(frozen=True)
class ReportLine:
    """
    A single (size, path) pair selected for output.

    Attributes:
        size: Aggregate size in bytes.
        path: Path as reached from its root argument.
    """
    size: int
    path: str

    def render(self, human_readable: bool) -> str:
        return f"{format_size(self.size, human_readable)} {self.path}\n"


@dataclass(frozen=True)
class ScanResult:
    """
    Summary of a complete run over every root path.

    Attributes:
        roots: Root paths in the order they were walked.
        totals: Aggregate size per root path.
        lines_written: Number of report lines emitted.
        errors: Number of per-node filesystem failures that were skipped.
    """
    roots: List[str] = field(default_factory=list)
    totals: Dict[str, int] = field(default_factory=dict)
    lines_written: int = 0
    errors: int = 0

    @property
    def grand_total(self) -> int:
        return sum(self.totals.values())
