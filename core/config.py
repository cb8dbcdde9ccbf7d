"""
Configuration: environment variables and optional config file (JSON).
CLI arguments override config file override env vars.
"""
import json
import logging
import os
from typing import Any

from core.constants import OUTPUT_FORMATS

logger = logging.getLogger("mailaudit.config")

_BOOL_KEYS = ("verbose", "quiet")
_STR_KEYS = ("nameserver", "dkim_selector", "bimi_selector", "output_dir", "log_file")
_FLOAT_KEYS = ("dns_timeout", "http_timeout")


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name, "").strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default


def _env_float(name: str, default: float | None = None) -> float | None:
    v = os.environ.get(name, "").strip()
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        logger.warning("Environment variable %s has invalid value %r; ignoring.", name, v)
        return default


def _env_str(name: str) -> str | None:
    return os.environ.get(name, "").strip() or None


def _output_format(value: Any) -> str | None:
    fmt = str(value or "").strip().lower()
    if not fmt:
        return None
    if fmt not in OUTPUT_FORMATS:
        logger.warning("Unknown output format %r; expected one of %s.", value, ", ".join(OUTPUT_FORMATS))
        return None
    return fmt


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables (MAILAUDIT_*)."""
    return {
        "verbose": _env_bool("MAILAUDIT_VERBOSE", False),
        "quiet": _env_bool("MAILAUDIT_QUIET", False),
        "nameserver": _env_str("MAILAUDIT_NAMESERVER"),
        "dkim_selector": _env_str("MAILAUDIT_DKIM_SELECTOR"),
        "bimi_selector": _env_str("MAILAUDIT_BIMI_SELECTOR"),
        "output_dir": _env_str("MAILAUDIT_OUTPUT_DIR"),
        "output_format": _output_format(os.environ.get("MAILAUDIT_FORMAT")) or "text",
        "log_file": _env_str("MAILAUDIT_LOG_FILE"),
        "dns_timeout": _env_float("MAILAUDIT_DNS_TIMEOUT"),
        "http_timeout": _env_float("MAILAUDIT_HTTP_TIMEOUT"),
    }


def load_file_config(path: str) -> dict[str, Any]:
    """Load configuration from a JSON file. Returns empty dict on error."""
    if not path or not os.path.isfile(path):
        if path:
            logger.warning("Config file %s not found; ignoring.", path)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object; ignoring.", path)
        return {}
    # Map common keys to our names
    mapping = {
        "server": "nameserver",
        "dns_server": "nameserver",
        "selector": "dkim_selector",
        "format": "output_format",
        "output_directory": "output_dir",
    }
    out: dict[str, Any] = {}
    for k, v in data.items():
        key = mapping.get(k, k)
        if key in _BOOL_KEYS:
            out[key] = bool(v)
        elif key in _STR_KEYS:
            out[key] = str(v).strip() if v else None
        elif key == "output_format":
            out[key] = _output_format(v)
        elif key in _FLOAT_KEYS:
            try:
                out[key] = float(v) if v is not None else None
            except (TypeError, ValueError):
                logger.warning("Config key %s has invalid value %r; skipping.", key, v)
        else:
            logger.debug("Unknown config key %s; skipping.", k)
    return out


def merge_config(env: dict[str, Any], file_cfg: dict[str, Any], cli: dict[str, Any]) -> dict[str, Any]:
    """Merge env (base), then file, then CLI. CLI overrides all."""
    out = dict(env)
    for k, v in file_cfg.items():
        if v is not None:
            out[k] = v
    for k, v in cli.items():
        if v is not None:
            out[k] = v
    return out
