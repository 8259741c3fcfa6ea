"""Provision the F3D source tree: reuse an existing checkout or make a shallow clone."""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from f3d_tooling.native_libs.config import NativeLibsConfig
from f3d_tooling.native_libs.process import StepResult, require_tool, run_step

log = logging.getLogger(__name__)


def is_git_checkout(path: Path) -> bool:
    return (path / ".git").exists()


def clone_command(repo_url: str, branch: str, dest: Path) -> list[str]:
    """Shallow, single-branch, blob-filtered clone of branch into dest."""
    return [
        "git",
        "clone",
        "--branch",
        branch,
        "--depth",
        "1",
        "--single-branch",
        "--filter=blob:none",
        repo_url,
        str(dest),
    ]


def clone_source(config: NativeLibsConfig, dest: Path) -> StepResult:
    """Clone config.repo at config.branch into dest. LFS content is not fetched."""
    if not config.dry_run:
        tool = require_tool("git")
        if not tool.ok:
            return tool
    print(f"Cloning {config.repo_url} ({config.branch}) into {dest} ...")
    r = run_step(
        clone_command(config.repo_url, config.branch, dest),
        env={"GIT_LFS_SKIP_SMUDGE": "1"},
        dry_run=config.dry_run,
    )
    if not r.ok:
        return StepResult.failure(f"Clone of {config.repo_url} ({config.branch}) failed: {r.detail}")
    return r


@contextmanager
def ephemeral_dir(prefix: str = "f3d-src-") -> Iterator[Path]:
    """Temporary directory removed on every exit path, including errors and interrupts."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        print(f"Cleaning up {path}")
        shutil.rmtree(path, ignore_errors=True)


@contextmanager
def provisioned_source(config: NativeLibsConfig) -> Iterator[tuple[Path, StepResult]]:
    """Yield (source_dir, result). result is a failure when the clone did not succeed.

    With no clone_dir configured the tree lives in an ephemeral directory that is
    removed when the context exits. A configured clone_dir is never removed; if it
    already holds a checkout it is used as-is and repo/branch are ignored.
    """
    if config.clone_dir is None:
        with ephemeral_dir() as tmp:
            yield tmp, clone_source(config, tmp)
        return

    clone_dir = config.clone_dir
    if is_git_checkout(clone_dir):
        print(f"Source directory {clone_dir} already contains a git repo, skipping clone.")
        log.debug("ignoring repo=%s branch=%s for existing checkout", config.repo, config.branch)
        yield clone_dir, StepResult.success()
        return
    yield clone_dir, clone_source(config, clone_dir)
