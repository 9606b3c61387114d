from __future__ import annotations

"""
Logging Configuration Models.

rdu logs per-node failures at WARNING, run summaries at INFO and
scheduling details at DEBUG; any other level name falls back to WARNING.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
}

# Console lines share the "rdu: ..." prefix of argparse errors.
CONSOLE_FORMAT = "rdu: %(levelname)s | %(message)s"
# Thread names tell pool workers apart in a parallel walk.
FILE_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Diagnostic stream settings for one CLI run.

    Attributes:
        level: Minimum severity name ("DEBUG", "INFO" or "WARNING").
        console: Write diagnostics to stderr.
        log_file: Optional path of a rotating diagnostic file (--log-file).
        max_bytes: Size of a log file segment before rotation.
        backup_count: Rotated segments kept next to the active file.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 2
