from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper for the build engine, ensuring that the
configuration dictionary conforms to the expected schema. Handles type
coercion, default value injection and path normalization.
"""

import logging
from typing import Any, Dict, List, Tuple

from sitesmith.domain.config import get_default_config
from sitesmith.infra.fs import normalize_path

logger = logging.getLogger(__name__)

_STRING_FIELDS = ["src_dir", "data_dir", "dist_dir", "host", "notify_webhook", "log_file"]
_BOOL_FIELDS = ["production", "serve", "watch"]
_LIST_FIELDS = [
    "page_globs", "template_watch_globs", "image_globs", "font_globs",
    "static_globs", "script_watch_globs", "style_watch_globs",
]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Converts untrusted inputs (project file, CLI) into typed parameters and
    fills missing keys with defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return get_default_config(), warnings

    project_root = config.get("project_root")
    defaults = get_default_config(project_root if isinstance(project_root, str) and project_root else None)

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    merged["project_root"] = normalize_path(
        _as_str(merged.get("project_root"), defaults["project_root"], "project_root", warnings, strict),
        defaults["project_root"],
    )

    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults.get(field, ""), field, warnings, strict)

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults.get(field, False), field, warnings, strict)

    for field in _LIST_FIELDS:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["port"] = _as_int_range(merged.get("port"), defaults["port"], "port", 0, 65535, warnings, strict)
    merged["watch_interval"] = _as_positive_float(
        merged.get("watch_interval"), defaults["watch_interval"], "watch_interval", warnings, strict
    )
    merged["bundles"] = _as_bundles(merged.get("bundles"), defaults["bundles"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _fail(msg: str, warnings: List[str], strict: bool) -> None:
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    _fail(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    _fail(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_int_range(
        value: Any, fallback: int, field: str, low: int, high: int, warnings: List[str], strict: bool
) -> int:
    """Accept ints (or numeric strings when lenient) within [low, high]."""
    if value is None:
        return fallback
    if isinstance(value, str) and not strict and value.strip().isdigit():
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        value = int(value.strip())
    if isinstance(value, int) and not isinstance(value, bool):
        if low <= value <= high:
            return value
        _fail(f"Invalid field '{field}': {value} is outside {low}-{high}.", warnings, strict)
        return fallback

    _fail(f"Invalid field '{field}': expected int, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_positive_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    if value is None:
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)

    _fail(f"Invalid field '{field}': expected a positive number.", warnings, strict)
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out else list(fallback)

    _fail(f"Invalid field '{field}': expected list[str], received {type(value).__name__}.", warnings, strict)
    return list(fallback)


def _as_bundles(
        value: Any, fallback: Dict[str, List[str]], warnings: List[str], strict: bool
) -> Dict[str, List[str]]:
    """Validate the bundle map: output path -> non-empty list of entry files."""
    if value is None:
        return {k: list(v) for k, v in fallback.items()}
    if not isinstance(value, dict):
        _fail(f"Invalid field 'bundles': expected dict, received {type(value).__name__}.", warnings, strict)
        return {k: list(v) for k, v in fallback.items()}

    out: Dict[str, List[str]] = {}
    for out_rel, entries in value.items():
        if isinstance(entries, str):
            entries = [entries]
        if not isinstance(out_rel, str) or not isinstance(entries, list) \
                or not all(isinstance(e, str) and e.strip() for e in entries) or not entries:
            msg = f"Invalid bundle '{out_rel}': expected a list of entry paths."
            if strict:
                raise TypeError(msg)
            warnings.append(f"{msg} Bundle discarded.")
            continue
        out[out_rel.strip().lstrip("/")] = [e.strip() for e in entries]
    return out
