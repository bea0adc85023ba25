"""Version detection for builds and source checkouts."""

from __future__ import annotations

import os
import re
from pathlib import Path

_FALLBACK_VERSION = "0.1.0"

# Release headings look like: ## [1.2.0] - 2026-10-01
_VERSION_PATTERN = re.compile(r"^## \[(\d+\.\d+\.\d+)\]")
_UNRELEASED_PATTERN = re.compile(r"^## \[?Unreleased\]?", re.IGNORECASE)


def _find_changelog() -> Path | None:
    current_dir = Path(__file__).parent
    for candidate in (current_dir.parent.parent / "CHANGELOG.md", current_dir / "CHANGELOG.md"):
        if candidate.exists():
            return candidate
    return None


def _get_version_from_changelog() -> tuple[str | None, bool]:
    """Return the newest released version and whether an unreleased section leads.

    Returns:
        Tuple of (version, is_unreleased). Version is None if not found.
    """
    changelog_path = _find_changelog()
    if not changelog_path:
        return None, False

    is_unreleased = False
    try:
        with open(changelog_path, encoding="utf-8") as f:
            for line in f:
                if _UNRELEASED_PATTERN.match(line):
                    is_unreleased = True
                    continue
                match = _VERSION_PATTERN.match(line)
                if match:
                    return match.group(1), is_unreleased
    except OSError:
        pass

    return None, is_unreleased


def get_version() -> str:
    """Get the current version string.

    Priority:
    1. BUILD_VERSION environment variable (set during CI/CD)
    2. CHANGELOG.md version, suffixed with ``.dev0`` under an unreleased section
    3. Fallback version
    """
    build_version = os.environ.get("BUILD_VERSION")
    if build_version:
        return build_version.strip()

    changelog_version, is_unreleased = _get_version_from_changelog()
    if changelog_version:
        return f"{changelog_version}.dev0" if is_unreleased else changelog_version

    return _FALLBACK_VERSION


__version__ = get_version()
