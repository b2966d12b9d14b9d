from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


DEFAULT_BASE_URL = "https://news.ycombinator.com"
DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "config" / "settings.yml"


@dataclass
class CheckSettings:
    base_url: str = DEFAULT_BASE_URL
    target_count: int = 100
    timeout_ms: int = 30_000
    username: str | None = None
    password: str | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)


_settings: CheckSettings | None = None


def load_settings(path: Path | None = None) -> CheckSettings:
    """Load check settings from YAML, with credentials taken from the environment."""
    global _settings
    if path is None:
        path = DEFAULT_SETTINGS_PATH
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}
    else:
        data = {}

    file_base_url = str(data.get("base_url") or "").strip()
    env_base_url = (os.getenv("HNCHECK_BASE_URL") or "").strip()
    base_url = (env_base_url or file_base_url or DEFAULT_BASE_URL).rstrip("/")

    target_count = _positive_int(data.get("target_count", 100), "target_count")
    timeout_ms = _positive_int(data.get("timeout_ms", 30_000), "timeout_ms")

    username = (os.getenv("HN_USERNAME") or "").strip() or None
    password = os.getenv("HN_PASSWORD") or None

    _settings = CheckSettings(
        base_url=base_url,
        target_count=target_count,
        timeout_ms=timeout_ms,
        username=username,
        password=password,
    )
    return _settings


def get_settings() -> CheckSettings:
    """Return cached settings, loading defaults if needed."""
    global _settings
    if _settings is None:
        return load_settings()
    return _settings


def _positive_int(raw_value: Any, name: str) -> int:
    if isinstance(raw_value, bool) or (isinstance(raw_value, float) and not raw_value.is_integer()):
        raise ValueError(f"{name} must be an integer")
    try:
        value = int(raw_value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero")
    return value
