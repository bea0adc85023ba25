from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

_ENV_BOOLEANS = {"1": True, "true": True, "yes": True, "on": True, "0": False, "false": False, "no": False, "off": False}

_SANITIZE_KEY_PATTERN = re.compile(r"[^a-z0-9_\-]")


def sanitize_key(value: str) -> str:
    """Lower-case a slug and strip everything but ``a-z0-9_-``."""
    return _SANITIZE_KEY_PATTERN.sub("", value.lower())


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def expand_env(value: Any) -> Any:
    """Substitute ``$VAR`` references in every string of a loaded YAML tree."""
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return list(map(expand_env, value))
    return os.path.expandvars(value) if isinstance(value, str) else value


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Read a YAML document; an empty file yields ``{}``."""
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    return expand_env(document or {})


def env_bool(name: str) -> bool | None:
    """Boolean override from the environment, ``None`` when unset or unrecognized."""
    raw = os.environ.get(name)
    return None if raw is None else _ENV_BOOLEANS.get(raw.strip().lower())


def env_list(name: str, separator: str = ",") -> list[str] | None:
    """Separated list override from the environment; blank items are dropped."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    return [item for item in map(str.strip, raw.split(separator)) if item]


def validate_url(url: str | None) -> bool:
    """True for absolute ``http``/``https`` URLs with a host."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
