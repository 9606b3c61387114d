from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides. Unknown options are rejected by argparse before
any traversal starts (strict policy).

Note that -h selects human-readable sizes, as in du; help is --help only.
"""

import argparse
from typing import Any, Dict

from rdu import __version__

# -----------------------------------------------------------------------------
# VALUE TYPES
# -----------------------------------------------------------------------------

def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")
    if n < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must be zero or greater")
    return n


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")
    if n < 1:
        raise argparse.ArgumentTypeError(f"'{value}' must be at least 1")
    return n


# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the rdu CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="rdu",
        description="Summarize recursive disk usage of each PATH (default: current directory).",
        add_help=False,
        allow_abbrev=False,
    )

    p.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Root paths to walk.",
    )

    # --- Report Filters ---
    p.add_argument(
        "-d", "--max-depth",
        dest="max_depth",
        type=int,
        default=None,
        metavar="N",
        help="Report entries at most N levels below each root (default: 3; negative prints nothing).",
    )
    p.add_argument(
        "-t", "--threshold",
        dest="threshold",
        type=_non_negative_int,
        default=None,
        metavar="N",
        help="Report only entries larger than N bytes (default: 0).",
    )
    p.add_argument(
        "-h", "--human-readable",
        dest="human_readable",
        action="store_true",
        help="Print sizes with K/M/G/T suffixes (powers of 1000, truncated).",
    )

    # --- Scheduling ---
    p.add_argument(
        "-j", "--jobs",
        dest="jobs",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Worker threads for the walk (default: CPU count; 1 walks sequentially).",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persistent configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print a JSON run summary to stderr after the report.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        metavar="PATH",
        help="Also write diagnostics to a rotating log file.",
    )
    p.add_argument("--help", action="help", help="Show this help message and exit.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return p


# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Flags that were not given map to None (or are omitted) so that values
    from the persistent configuration survive the merge.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "paths": list(args.paths) if args.paths else None,
        "max_depth": args.max_depth,
        "threshold": args.threshold,
        "jobs": args.jobs,
    }

    if args.human_readable:
        overrides["human_readable"] = True

    return overrides
