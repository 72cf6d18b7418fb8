import json
import logging
import os
from pathlib import Path

from core.errors import PersistenceFailure

log = logging.getLogger(__name__)

SETTINGS_PATH = Path("reader_settings.json")
LIBRARY_PATH = Path("library")

DEFAULTS = {
    "theme": "light",
    "reading_mode": "2d",
    "font_family": "georgia",
    "font_size": 18,
    "line_height": 1.6,
    "words_per_page": 400,
    "animation_speed": "normal",
}

CHOICES = {
    "font_family": {"georgia", "times", "arial", "helvetica"},
    "theme": {"light", "dark", "sepia"},
    "reading_mode": {"2d", "3d"},
    "animation_speed": {"slow", "normal", "fast"},
}

FONT_SIZE_RANGE = (12, 32)

MINIMUMS = {
    "line_height": 1.0,
    "words_per_page": 1,
}


def _coerce(key, value):
    default = DEFAULTS[key]
    try:
        if isinstance(default, int):
            coerced = int(float(str(value).strip()))
        elif isinstance(default, float):
            coerced = float(str(value).strip())
        else:
            coerced = str(value).strip().lower()
    except (TypeError, ValueError, OverflowError):
        return default
    if key in MINIMUMS and coerced < MINIMUMS[key]:
        return default
    if key in CHOICES and coerced not in CHOICES[key]:
        return default
    if key == "font_size":
        return max(FONT_SIZE_RANGE[0], min(coerced, FONT_SIZE_RANGE[1]))
    return coerced


def normalize_settings(raw):
    settings = dict(DEFAULTS)
    if not isinstance(raw, dict):
        return settings
    for key in DEFAULTS:
        if key in raw and raw[key] is not None:
            settings[key] = _coerce(key, raw[key])
    return settings


def load_settings(path=SETTINGS_PATH):
    path = Path(path)
    if not path.exists():
        return dict(DEFAULTS)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return dict(DEFAULTS)

    return normalize_settings(raw)


def save_settings(settings, path=SETTINGS_PATH):
    payload = normalize_settings(settings)
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as exc:
        raise PersistenceFailure("Saving settings", exc) from exc
    return payload


def resolve_library_dir(environ=None):
    environ = os.environ if environ is None else environ
    raw = str(environ.get("MINDFUL_LIBRARY_DIR", "") or "").strip()
    return Path(raw) if raw else LIBRARY_PATH


def debug_enabled(environ=None):
    environ = os.environ if environ is None else environ
    return str(environ.get("MINDFUL_DEBUG", "0")).strip() == "1"
