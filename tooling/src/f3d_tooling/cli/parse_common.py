"""Shared CLI argument parsing for `--flag value` options (--project-root, --arch, etc.)."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any


class UsageError(Exception):
    """Raised when argv contains an unknown flag or a flag without its value."""


def parse_flags(
    argv: list[str],
    *specs: tuple[str, str, Any, Callable[[str], Any] | None],
) -> tuple[dict[str, Any], list[str]]:
    """Parse optional --flag value from argv in one pass.

    Each spec is (key, flag_str, default, converter).
    E.g. ("project_root", "--project-root", Path.cwd, path_resolver).
    converter can be None for string values. A default that produces a list
    marks the flag as repeatable: every occurrence is appended.
    Returns (dict of key -> value, remaining argv).
    """
    result: dict[str, Any] = {}
    for key, _flag, default, _converter in specs:
        result[key] = default() if callable(default) else default

    rest: list[str] = []
    i = 0
    while i < len(argv):
        matched = False
        for key, flag_str, _default, converter in specs:
            if argv[i] == flag_str and i + 1 < len(argv):
                value = converter(argv[i + 1]) if converter else argv[i + 1]
                if isinstance(result[key], list):
                    result[key].append(value)
                else:
                    result[key] = value
                i += 2
                matched = True
                break
        if not matched:
            rest.append(argv[i])
            i += 1
    return result, rest


def parse_flags_strict(
    argv: list[str],
    *specs: tuple[str, str, Any, Callable[[str], Any] | None],
    switches: tuple[str, ...] = (),
) -> tuple[dict[str, Any], set[str]]:
    """Like parse_flags, but anything left over that is not a known switch raises UsageError.

    Returns (dict of key -> value, set of switches present).
    """
    parsed, rest = parse_flags(argv, *specs)
    value_flags = {flag for _key, flag, _default, _converter in specs}
    present: set[str] = set()
    for arg in rest:
        if arg in switches:
            present.add(arg)
        elif arg in value_flags:
            raise UsageError(f"option '{arg}' requires a value")
        else:
            raise UsageError(f"unknown option '{arg}'")
    return parsed, present


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --project-root, --clone-dir, --config)."""
    return Path(s).expanduser().resolve()
