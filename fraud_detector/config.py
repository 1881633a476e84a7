"""Load detector settings from config/detector.yaml and the environment."""
from __future__ import annotations

import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from fraud_detector.log import get_logger
from fraud_detector.scorer import DEFAULT_THRESHOLDS, Thresholds

log = get_logger(__name__)

load_dotenv()

ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT / "config"
REPORTS_DIR: Path = ROOT / "reports"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def config_path() -> Path:
    override = get_env("FRAUD_DETECTOR_CONFIG")
    return Path(override) if override else CONFIG_DIR / "detector.yaml"


def data_dir() -> Path:
    override = get_env("FRAUD_DETECTOR_DATA_DIR")
    return Path(override) if override else ROOT / "data"


def authors_dir() -> Path:
    return data_dir() / "authors"


def ensure_dirs() -> None:
    for d in (authors_dir(), REPORTS_DIR):
        d.mkdir(parents=True, exist_ok=True)


def load_settings(path: Path | None = None) -> dict[str, Any]:
    path = path or config_path()
    if not path.exists():
        log.debug("No settings file at %s — using defaults", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def _as_tuple(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_as_tuple(v) for v in value)
    return value


def load_thresholds(settings: dict[str, Any] | None = None) -> Thresholds:
    """Defaults overlaid with the ``thresholds:`` mapping; unknown keys are ignored."""
    if settings is None:
        settings = load_settings()
    overrides = settings.get("thresholds") or {}
    known = {f.name for f in fields(Thresholds)}
    values: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            log.warning("Ignoring unknown threshold %r in settings", key)
            continue
        values[key] = _as_tuple(value)
    hp = replace(DEFAULT_THRESHOLDS, **values)
    for min_posts, days, confidence in hp.date_window_rules:
        if days not in hp.recency_windows:
            log.warning(
                "Date-window rule (%s, %s, %s) never fires: no %s-day recency window",
                min_posts, days, confidence, days,
            )
    return hp
