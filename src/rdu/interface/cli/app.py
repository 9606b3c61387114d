from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration
resolution (defaults, persistent file, CLI overrides), the scan itself and
the optional JSON summary. Maps failures to process exit codes:

    0   success (unreadable entries are diagnostics, not failures)
    1   report output could not be written, or unexpected failure
    2   invalid configuration (argparse uses the same code)
    130 interrupted
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from rdu.core.engine import run_scan
from rdu.core.validator import build_options, validate_config
from rdu.domain.config import get_default_config, load_config
from rdu.domain.errors import ConfigurationError, OutputError
from rdu.domain.models import ScanResult
from rdu.infra.logging import LoggingConfig, configure_logging, get_logger, stop_logging
from rdu.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file), force=True)

    try:
        return _run(args)
    finally:
        stop_logging()


def _run(args: argparse.Namespace) -> int:
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 1. Base configuration (defaults vs persistent file), validated leniently
    base_conf = get_default_config() if args.use_defaults else load_config()
    base_conf, warnings = validate_config(base_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 2. Command-line overrides are validated strictly
    overrides = cli_args.args_to_overrides(args)
    try:
        clean_conf, _ = validate_config(_merge_config(base_conf, overrides), strict=True)
    except ConfigurationError as e:
        print(f"rdu: error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    options = build_options(clean_conf)
    logger.debug(f"Effective options: {options}")

    # 3. Scan
    try:
        result = run_scan(clean_conf["paths"], options, stream=sys.stdout)
    except OutputError as e:
        logger.critical(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("rdu: interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED

    if args.json_output:
        _print_json_summary(result)

    return EXIT_OK


# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge override values that were actually given.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject; None means "not given".

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in ("paths", "max_depth", "threshold", "human_readable", "jobs"):
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


# -----------------------------------------------------------------------------
# SUMMARY RENDERING
# -----------------------------------------------------------------------------

def _print_json_summary(result: ScanResult) -> None:
    payload = asdict(result)
    payload["grand_total"] = result.grand_total
    print(json.dumps(payload, ensure_ascii=False, indent=2), file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
