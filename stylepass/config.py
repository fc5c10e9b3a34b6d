# stylepass/config.py
"""
Settings persistence for StylePass.
Settings saved as JSON in %APPDATA%/StylePass/config.json (Windows) or ~/.stylepass/config.json (fallback).
STYLEPASS_CONFIG points at an alternate file. The OpenAI key only ever comes from the environment.
"""

import os
import json
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "openai_model": "gpt-4o-mini",
    "openai_base_url": "https://api.openai.com/v1",
    "temperature": 0.9,
    "max_tokens": 1000,
    "request_timeout": 30,
    "rate_limit_per_hour": 20,
    "default_length": 16,
}

# never written to disk
SECRET_KEYS = ("openai_api_key",)

def _appdata_dir() -> str:
    appdata = os.getenv("APPDATA")
    if appdata:
        return os.path.join(appdata, "StylePass")
    return os.path.join(os.path.expanduser("~"), ".stylepass")

def config_path() -> str:
    override = os.getenv("STYLEPASS_CONFIG")
    if override:
        return override
    return os.path.join(_appdata_dir(), "config.json")

def _apply_env(cfg: Dict[str, Any]) -> Dict[str, Any]:
    cfg["openai_api_key"] = os.getenv("OPENAI_API_KEY")
    limit = os.getenv("RATE_LIMIT_PER_HOUR")
    if limit:
        try:
            cfg["rate_limit_per_hour"] = int(limit)
        except ValueError:
            logger.warning("Ignoring non-integer RATE_LIMIT_PER_HOUR=%r", limit)
    return cfg

def load_config() -> Dict[str, Any]:
    p = config_path()
    out = DEFAULTS.copy()
    if os.path.exists(p):
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
            # merge defaults
            out.update(data or {})
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not read settings from %s (%s); using defaults", p, e)
            out = DEFAULTS.copy()
    return _apply_env(out)

def save_config(cfg: Dict[str, Any]) -> str:
    p = config_path()
    d = os.path.dirname(p)
    if d:
        os.makedirs(d, exist_ok=True)
    data = {k: v for k, v in cfg.items() if k not in SECRET_KEYS}
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return p

def coerce_value(key: str, raw: str) -> Any:
    """Convert a CLI string to the type of the matching default."""
    if key not in DEFAULTS:
        raise KeyError(f"Unknown setting: {key}")
    default = DEFAULTS[key]
    if isinstance(default, bool):
        return raw.lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw
