from __future__ import annotations

"""
Report Output Sinks.

Collects the report lines produced by the walker. The stream sink writes
each line as soon as it is emitted (sequential runs); the buffered sink
appends under a lock and writes everything in a single flush once every
root has been walked, so the lines of one invocation reach the output
contiguously even though they were produced concurrently.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, TextIO

from rdu.domain.errors import OutputError
from rdu.domain.models import ReportLine

logger = logging.getLogger(__name__)


class OutputSink(ABC):
    """
    Ordered, append-only destination for report lines.
    """

    def __init__(self, stream: TextIO, human_readable: bool = False) -> None:
        self._stream = stream
        self._human_readable = human_readable
        self._lock = threading.Lock()
        self._count = 0

    @property
    def lines_written(self) -> int:
        return self._count

    @abstractmethod
    def emit(self, line: ReportLine) -> None:
        """
        Append a report line.

        Raises:
            OutputError: If the line cannot be delivered to the stream.
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        """
        Push everything emitted so far to the underlying stream.

        Raises:
            OutputError: If the stream rejects the write.
        """
        pass

    def _write(self, text: str) -> None:
        try:
            self._stream.write(text)
            self._stream.flush()
        except (OSError, ValueError) as e:
            # ValueError covers writes to a closed stream
            raise OutputError(f"Failed to write report output: {e}") from e


class StreamSink(OutputSink):
    """Write-through sink for the single-threaded walker."""

    def emit(self, line: ReportLine) -> None:
        text = line.render(self._human_readable)
        with self._lock:
            self._write(text)
            self._count += 1

    def flush(self) -> None:
        pass


class BufferedSink(OutputSink):
    """Lock-guarded buffer drained to the stream exactly once."""

    def __init__(self, stream: TextIO, human_readable: bool = False) -> None:
        super().__init__(stream, human_readable)
        self._buffer: List[str] = []
        self._flushed = False

    def emit(self, line: ReportLine) -> None:
        text = line.render(self._human_readable)
        with self._lock:
            if self._flushed:
                raise OutputError("Report buffer was already flushed.")
            self._buffer.append(text)
            self._count += 1

    def flush(self) -> None:
        with self._lock:
            if self._flushed:
                return
            self._flushed = True
            payload = "".join(self._buffer)
            self._buffer.clear()

        logger.debug(f"Flushing {self._count} buffered report lines.")
        if payload:
            self._write(payload)
