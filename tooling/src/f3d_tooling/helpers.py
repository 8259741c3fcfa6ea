"""Shared helpers for f3d_tooling (text formatting, name checks).

Used by the native_libs pipeline and the CLI.
"""

from __future__ import annotations

import math
import re

_REPO_SLUG = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

# --- Text ---


def human_size(num_bytes: int) -> str:
    """Size rounded up like `du -h`: 512B, 4.0K, 32M, 1.2G."""
    if num_bytes < 1024:
        return f"{num_bytes}B"
    size = num_bytes / 1024
    for unit in ("K", "M", "G"):
        if unit == "G" or math.ceil(size) < 1024:
            break
        size /= 1024
    tenths = math.ceil(size * 10)
    if tenths < 100:
        return f"{tenths / 10:.1f}{unit}"
    return f"{math.ceil(size)}{unit}"


# --- Naming ---


def is_repo_slug(s: str) -> bool:
    """GitHub owner/name form, e.g. f3d-app/f3d."""
    return bool(_REPO_SLUG.match(s)) and ".." not in s
