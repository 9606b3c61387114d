from __future__ import annotations

"""
Recursive Size Aggregation Walker.

Walks a directory tree depth-first, summing file sizes bottom-up into their
containing directories and emitting a report line for every node that
passes the depth/threshold filter. The tree is never materialized: an
explicit stack of frames mirrors the open branch of the hierarchy, and each
total is dropped as soon as the parent has consumed it. Tree depth is
therefore bounded by memory, not by the interpreter's recursion limit.

Two scheduling models share the same per-node algorithm:
- TreeWalker: single thread, deterministic order (directories first, then
  files, each sorted by name).
- ParallelTreeWalker: sibling subdirectories fan out over a bounded thread
  pool. A subdirectory that finds no free worker slot is pushed onto the
  calling thread's own stack, so a parent waiting on its children never
  starves the pool.

Every filesystem failure is local to the node that failed: it is logged,
counted and contributes 0 bytes. Output failures and interrupts propagate;
once one is raised, no further directory is listed.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple

from rdu.core.services.sink import OutputSink
from rdu.domain.models import Options, ReportLine
from rdu.infra.fs import Entry, FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


class _Cancelled(Exception):
    """Raised inside a walk that observes the cancellation flag."""


class _Accumulator:
    """Lock-protected running total shared by concurrent completions."""

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def add(self, amount: int) -> None:
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class _Frame:
    """A listed directory waiting on the work stack for its children."""

    __slots__ = ("path", "depth", "dirs", "files", "total", "pending")

    def __init__(self, path: str, depth: int, dirs: List[Entry], files: List[Entry]) -> None:
        self.path = path
        self.depth = depth
        # Reversed so that pop() yields subdirectories in name order.
        self.dirs = dirs[::-1]
        self.files = files
        self.total = _Accumulator()
        self.pending: List[Future] = []


# -----------------------------------------------------------------------------
# SEQUENTIAL WALKER
# -----------------------------------------------------------------------------

class TreeWalker:
    """
    Single-threaded recursive size aggregation.

    Args:
        options: Read-only run options (depth/threshold filter).
        sink: Destination for visible report lines.
        fs: Listing capability. Defaults to the local disk.
    """

    def __init__(
            self,
            options: Options,
            sink: OutputSink,
            fs: Optional[FileSystem] = None,
    ) -> None:
        self.options = options
        self.sink = sink
        self.fs = fs or LocalFileSystem()
        self._errors = _Accumulator()
        self._cancel = threading.Event()
        self._failure_lock = threading.Lock()
        self._failure: Optional[BaseException] = None

    @property
    def errors(self) -> int:
        """Number of filesystem failures skipped so far."""
        return self._errors.value

    @property
    def cancelled(self) -> bool:
        """True once a walk has been aborted by an exception."""
        return self._cancel.is_set()

    def walk(self, path: str, depth: int = 0) -> int:
        """
        Compute the aggregate size of a path and report visible nodes.

        Args:
            path: Directory to walk. A path that cannot be listed (including
                  a regular file) is logged and counts as 0 bytes.
            depth: Depth of `path` below its root argument (root is 0).

        Returns:
            int: Total bytes of every file transitively contained in `path`.

        Raises:
            OutputError: If the sink cannot be written.
            KeyboardInterrupt: If the walk is interrupted. Directories not
                yet listed at that moment are never listed.
        """
        try:
            return self._walk_tree(path, depth)
        except _Cancelled:
            # A sibling thread aborted first; surface its exception instead.
            if self._failure is None:
                raise
            raise self._failure from None
        except BaseException as e:
            self._abort(e)
            raise

    def close(self) -> None:
        pass

    def __enter__(self) -> TreeWalker:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self._cancel.set()
        self.close()

    # -------------------------------------------------------------------------
    # WORK STACK
    # -------------------------------------------------------------------------

    def _walk_tree(self, path: str, depth: int) -> int:
        frame = self._open(path, depth)
        if frame is None:
            return 0

        stack = [frame]
        while True:
            frame = stack[-1]

            # Subdirectories first; a frame reports only after all of its children.
            if frame.dirs:
                child = self._descend(frame.dirs.pop(), frame)
                if child is not None:
                    stack.append(child)
                continue

            size = self._finish(frame)
            stack.pop()
            if not stack:
                return size
            stack[-1].total.add(size)

    def _open(self, path: str, depth: int) -> Optional[_Frame]:
        if self._cancel.is_set():
            raise _Cancelled(path)
        entries = self._list_entries(path)
        if entries is None:
            return None
        dirs, files = self._partition(entries)
        return _Frame(path, depth, dirs, files)

    def _finish(self, frame: _Frame) -> int:
        for entry in frame.files:
            size = self._measure(entry)
            if size is None:
                continue
            frame.total.add(size)
            self._report(entry.path, size, frame.depth + 1)

        self._join(frame.pending)

        size = frame.total.value
        self._report(frame.path, size, frame.depth)
        return size

    def _abort(self, exc: BaseException) -> None:
        with self._failure_lock:
            if self._failure is None and not isinstance(exc, _Cancelled):
                self._failure = exc
        self._cancel.set()

    # -------------------------------------------------------------------------
    # SCHEDULING HOOKS
    # -------------------------------------------------------------------------

    def _descend(self, entry: Entry, parent: _Frame) -> Optional[_Frame]:
        """Return the child's frame to walk in place, or None if it was handed off."""
        return self._open(entry.path, parent.depth + 1)

    def _join(self, pending: List[Future]) -> None:
        pass

    # -------------------------------------------------------------------------
    # PER-NODE OPERATIONS (None means "failed, skipped")
    # -------------------------------------------------------------------------

    def _list_entries(self, path: str) -> Optional[List[Entry]]:
        try:
            return self.fs.list_entries(path)
        except OSError as e:
            self._fail(f"Failed to read {path}: {e}")
            return None

    def _partition(self, entries: List[Entry]) -> Tuple[List[Entry], List[Entry]]:
        dirs: List[Entry] = []
        files: List[Entry] = []
        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError as e:
                self._fail(f"Failed to get file type for {entry.path}: {e}")
                continue
            (dirs if is_dir else files).append(entry)

        dirs.sort(key=lambda e: e.name)
        files.sort(key=lambda e: e.name)
        return dirs, files

    def _measure(self, entry: Entry) -> Optional[int]:
        try:
            return entry.size()
        except OSError as e:
            self._fail(f"Failed to get metadata for {entry.path}: {e}")
            return None

    def _report(self, path: str, size: int, depth: int) -> None:
        if self.options.is_visible(size, depth):
            self.sink.emit(ReportLine(size=size, path=path))

    def _fail(self, message: str) -> None:
        self._errors.add(1)
        logger.warning(message)


# -----------------------------------------------------------------------------
# PARALLEL WALKER
# -----------------------------------------------------------------------------

class ParallelTreeWalker(TreeWalker):
    """
    Recursive size aggregation with sibling fan-out over a thread pool.

    Each pool task runs the same stack-driven walk over its own subtree.
    The pool and its slot counter live for the whole walker, so several
    roots walked with the same instance share one bound on concurrency.
    Sibling order in the sink is not deterministic; the set of lines and
    every total are identical to the sequential walker's.

    Args:
        options: Read-only run options; `options.jobs` sizes the pool.
        sink: Destination for visible report lines (must be thread-safe).
        fs: Listing capability. Defaults to the local disk.
    """

    def __init__(
            self,
            options: Options,
            sink: OutputSink,
            fs: Optional[FileSystem] = None,
    ) -> None:
        super().__init__(options, sink, fs)
        workers = max(1, options.jobs)
        self._slots = threading.BoundedSemaphore(workers)
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rdu-walk")

    def close(self) -> None:
        # Queued subtrees of an aborted walk are dropped; running ones stop
        # at their next listing.
        self._executor.shutdown(wait=True, cancel_futures=self._cancel.is_set())

    def _descend(self, entry: Entry, parent: _Frame) -> Optional[_Frame]:
        # Outstanding tasks never exceed the pool size, so each gets a thread.
        if not self._slots.acquire(blocking=False):
            return self._open(entry.path, parent.depth + 1)
        try:
            future = self._executor.submit(
                self._walk_in_slot, entry.path, parent.depth + 1, parent.total
            )
        except BaseException:
            self._slots.release()
            raise
        parent.pending.append(future)
        return None

    def _join(self, pending: List[Future]) -> None:
        for future in pending:
            future.result()

    def _walk_in_slot(self, path: str, depth: int, total: _Accumulator) -> None:
        try:
            total.add(self._walk_tree(path, depth))
        except BaseException as e:
            self._abort(e)
            raise
        finally:
            self._slots.release()


def create_walker(
        options: Options,
        sink: OutputSink,
        fs: Optional[FileSystem] = None,
) -> TreeWalker:
    """
    Select the scheduling model for a run.

    Args:
        options: Run options; `jobs > 1` selects the parallel walker.
        sink: Report destination.
        fs: Optional listing capability override.

    Returns:
        TreeWalker: A walker usable as a context manager.
    """
    if options.parallel:
        logger.debug(f"Using parallel walker with {options.jobs} workers.")
        return ParallelTreeWalker(options, sink, fs)
    logger.debug("Using sequential walker.")
    return TreeWalker(options, sink, fs)
