"""Run external commands synchronously and report the outcome as a StepResult."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one pipeline step: ok, plus a diagnostic to show when it is not."""

    ok: bool
    detail: str = ""

    @classmethod
    def success(cls) -> StepResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, detail: str) -> StepResult:
        return cls(ok=False, detail=detail)


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


def require_tool(name: str) -> StepResult:
    """Fail when an executable is not on PATH."""
    if shutil.which(name) is None:
        return StepResult.failure(f"{name} is not installed or not on PATH")
    return StepResult.success()


def run_step(
    cmd: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> StepResult:
    """Run cmd and wait, output streaming to the terminal. env entries are added on top of os.environ.

    A non-zero exit or a missing executable becomes a failed StepResult; nothing
    here raises or exits.
    """
    shown = format_command(cmd)
    if dry_run:
        prefix = " ".join(f"{k}={v}" for k, v in (env or {}).items())
        print(f"[dry-run] would: {prefix + ' ' if prefix else ''}{shown}")
        return StepResult.success()

    log.debug("running: %s (extra env=%s)", shown, dict(env or {}))
    try:
        r = subprocess.run(
            list(cmd),
            env={**os.environ, **env} if env else None,
        )
    except FileNotFoundError:
        return StepResult.failure(f"{cmd[0]} not found; cannot run: {shown}")
    if r.returncode != 0:
        return StepResult.failure(f"command exited with {r.returncode}: {shown}")
    return StepResult.success()
