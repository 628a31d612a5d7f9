"""
Settings store for the cache zone, backed by AppState rows.

Values are sanitized both on write and on read, so rows edited by hand
behave the same as rows saved through the settings page.
"""

import re
from typing import Any, Callable, Dict

from flask import current_app

from .cache.types import CacheZoneConfig
from .extensions import db
from .models import AppState

KEY_CACHE_PATH = "nginx_cache_path"
KEY_AUTO_PURGE = "nginx_auto_purge"

_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_SPACE_RE = re.compile(r"\s+")


def sanitize_text_field(value: Any) -> str:
    """Strip tags and control characters, collapse whitespace."""
    if value is None:
        return ""
    s = _TAG_RE.sub("", str(value))
    s = _CONTROL_RE.sub(" ", s)
    s = _SPACE_RE.sub(" ", s)
    return s.strip()


def absint(value: Any) -> int:
    try:
        return abs(int(str(value).strip()))
    except (TypeError, ValueError):
        return 0


_SANITIZERS: Dict[str, Callable[[Any], Any]] = {
    KEY_CACHE_PATH: sanitize_text_field,
    KEY_AUTO_PURGE: absint,
}

# app.config keys used while no row has been saved yet
_CONFIG_DEFAULTS = {
    KEY_CACHE_PATH: "NGINX_CACHE_PATH",
    KEY_AUTO_PURGE: "NGINX_AUTO_PURGE",
}


def _sanitize(key: str, value: Any) -> Any:
    fn = _SANITIZERS.get(key)
    return fn(value) if fn else value


def get_setting(key: str, default: Any = None) -> Any:
    state = AppState.query.filter_by(key=key).first()
    if state is not None:
        raw = state.value
    elif key in _CONFIG_DEFAULTS:
        raw = current_app.config.get(_CONFIG_DEFAULTS[key], default)
    else:
        raw = default
    return _sanitize(key, raw)


def set_setting(key: str, value: Any) -> Any:
    """Stage a sanitized value; the caller commits."""
    clean = _sanitize(key, value)
    state = AppState.query.filter_by(key=key).first()
    if state is None:
        state = AppState(key=key)
        db.session.add(state)
    state.value = str(clean)
    return clean


def load_config() -> CacheZoneConfig:
    return CacheZoneConfig(
        path=get_setting(KEY_CACHE_PATH, ""),
        auto_purge_enabled=bool(get_setting(KEY_AUTO_PURGE, 0)),
    )


def save_config(path: str, auto_purge: bool) -> CacheZoneConfig:
    set_setting(KEY_CACHE_PATH, path)
    set_setting(KEY_AUTO_PURGE, 1 if auto_purge else 0)
    db.session.commit()
    return load_config()
