from __future__ import annotations

"""
Core scan orchestration.

Runs the walker once per root path with a single sink for the whole
invocation:
1. Selects the sink (write-through when sequential, buffered when parallel).
2. Walks every root at depth 0, in argument order.
3. Flushes the sink exactly once after the last root.
4. Returns the run summary.
"""

import logging
import sys
from typing import Dict, Iterable, List, Optional, TextIO

from rdu.core.services.sink import BufferedSink, OutputSink, StreamSink
from rdu.core.services.walker import create_walker
from rdu.domain.models import Options, ScanResult
from rdu.infra.fs import FileSystem

logger = logging.getLogger(__name__)


def create_sink(options: Options, stream: TextIO) -> OutputSink:
    """Pick the sink matching the walker's scheduling model."""
    if options.parallel:
        return BufferedSink(stream, options.human_readable)
    return StreamSink(stream, options.human_readable)


def run_scan(
        paths: Iterable[str],
        options: Options,
        *,
        stream: Optional[TextIO] = None,
        fs: Optional[FileSystem] = None,
        sink: Optional[OutputSink] = None,
) -> ScanResult:
    """
    Compute and report disk usage for every root path.

    Args:
        paths: Root paths. An empty iterable walks the current directory.
        options: Read-only run options.
        stream: Report destination. Defaults to sys.stdout.
        fs: Optional listing capability override.
        sink: Optional sink override; `stream` is ignored when given.

    Returns:
        ScanResult: Per-root totals, emitted line count and skipped failures.

    Raises:
        OutputError: If the report cannot be written.
    """
    roots: List[str] = list(paths) or ["."]
    if sink is None:
        sink = create_sink(options, stream if stream is not None else sys.stdout)

    totals: Dict[str, int] = {}

    with create_walker(options, sink, fs) as walker:
        for root in roots:
            logger.debug(f"Walking root: {root}")
            size = walker.walk(root, 0)
            totals[root] = size
        errors = walker.errors

    sink.flush()

    if errors:
        logger.info(f"Scan finished with {errors} unreadable entries skipped.")

    return ScanResult(
        roots=roots,
        totals=totals,
        lines_written=sink.lines_written,
        errors=errors,
    )
