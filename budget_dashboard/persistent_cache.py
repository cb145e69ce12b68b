"""Small JSON store for the dashboard's last-used selections."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from . import config
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CACHE: Dict[str, Any] = {
    'profile_id': None,
    'pace_mode': config.PACE_MODE,
}


def load_cache(path: Path | None = None) -> Dict[str, Any]:
    target = path or config.CACHE_PATH
    if not target.exists():
        return DEFAULT_CACHE.copy()
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable preferences cache %s: %s", target, exc)
        return DEFAULT_CACHE.copy()
    if not isinstance(data, dict):
        return DEFAULT_CACHE.copy()
    merged = DEFAULT_CACHE.copy()
    merged.update({k: v for k, v in data.items() if k in DEFAULT_CACHE})
    if merged['pace_mode'] not in config.PACE_MODES:
        merged['pace_mode'] = DEFAULT_CACHE['pace_mode']
    return merged


def save_cache(cache: Dict[str, Any], path: Path | None = None) -> None:
    target = path or config.CACHE_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {k: v for k, v in cache.items() if k in DEFAULT_CACHE}
    with target.open('w', encoding='utf-8') as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)
