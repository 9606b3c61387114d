from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (CLI flags, the
persistent JSON file) and the walker. Normalizes a raw dictionary into
typed values and builds the immutable Options shared by the run.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from rdu.domain.config import get_default_config
from rdu.domain.errors import ConfigurationError
from rdu.domain.models import Options

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Missing keys are filled with defaults. In lenient mode invalid values
    fall back to their default and a warning is recorded; in strict mode
    the first invalid value raises.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise ConfigurationError instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.

    Raises:
        ConfigurationError: In strict mode, on the first invalid value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise ConfigurationError(msg)
        warnings.append(f"{msg} Using defaults.")
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    merged["paths"] = _as_paths(merged.get("paths"), defaults["paths"], warnings, strict)
    merged["max_depth"] = _as_int(
        merged.get("max_depth"), defaults["max_depth"], "max_depth", warnings, strict
    )
    merged["threshold"] = _as_int(
        merged.get("threshold"), defaults["threshold"], "threshold", warnings, strict, minimum=0
    )
    merged["jobs"] = _as_int(
        merged.get("jobs"), defaults["jobs"], "jobs", warnings, strict, minimum=1
    )
    merged["human_readable"] = _as_bool(
        merged.get("human_readable"), defaults["human_readable"], "human_readable", warnings, strict
    )

    return merged, warnings


def build_options(config: Dict[str, Any]) -> Options:
    """
    Create the immutable run options from a validated configuration.

    Args:
        config: Output of validate_config.

    Returns:
        Options: Options shared by every walker call.
    """
    return Options(
        max_depth=config["max_depth"],
        threshold=config["threshold"],
        human_readable=config["human_readable"],
        jobs=config["jobs"],
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, fallback: Any, warnings: List[str], strict: bool) -> Any:
    if strict:
        raise ConfigurationError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(
        value: Any,
        fallback: int,
        field: str,
        warnings: List[str],
        strict: bool,
        minimum: Optional[int] = None,
) -> int:
    """Validate an integer field, with optional numeric string coercion."""
    if value is None:
        return fallback

    if isinstance(value, bool):
        return _reject(f"Invalid field '{field}': expected int, received bool.", fallback, warnings, strict)

    if isinstance(value, str) and not strict:
        try:
            value = int(value.strip())
            warnings.append(f"Field '{field}' converted from string to int.")
        except ValueError:
            return _reject(f"Invalid field '{field}': '{value}' is not a number.", fallback, warnings, strict)

    if not isinstance(value, int):
        return _reject(
            f"Invalid field '{field}': expected int, received {type(value).__name__}.",
            fallback, warnings, strict,
        )

    if minimum is not None and value < minimum:
        return _reject(f"Invalid field '{field}': {value} is below {minimum}.", fallback, warnings, strict)

    return value


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict and isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "1", "yes", "y"):
            warnings.append(f"Field '{field}' converted from '{value}' to True.")
            return True
        if s in ("false", "0", "no", "n"):
            warnings.append(f"Field '{field}' converted from '{value}' to False.")
            return False

    return _reject(
        f"Invalid field '{field}': expected bool, received {type(value).__name__}.",
        fallback, warnings, strict,
    )


def _as_paths(value: Any, fallback: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Ensure the root list is a non-empty list of non-empty strings."""
    if value is None:
        return list(fallback)

    if isinstance(value, str):
        value = [value]

    if not isinstance(value, list):
        return _reject(
            f"Invalid field 'paths': expected list[str], received {type(value).__name__}.",
            list(fallback), warnings, strict,
        )

    out: List[str] = []
    for i, item in enumerate(value):
        if isinstance(item, str) and item:
            out.append(item)
            continue
        msg = f"Invalid item in 'paths[{i}]': expected non-empty str."
        if strict:
            raise ConfigurationError(msg)
        warnings.append(f"{msg} Item discarded.")

    return out if out else list(fallback)
