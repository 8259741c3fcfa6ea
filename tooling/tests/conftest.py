"""Pytest fixtures for f3d tooling tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

IMAGE_PREFIX = "ghcr.io/f3d-app/f3d-android-"


class FakeDocker:
    """Stand-in for subprocess.run that records commands and fakes git/docker.

    `docker run` writes build-<arch>/lib/libf3d-java.so and build-<arch>/java/f3d.jar
    under the mounted source dir, unless the arch is listed in no_output_for.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.local_images: set[str] = set()
        self.fail_build_for: set[str] = set()
        self.fail_pull_for: set[str] = set()
        self.no_output_for: set[str] = set()
        self.fail_clone = False
        # Called with the arch at the start of each `docker run`.
        self.on_build = None

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        if cmd[:2] == ["git", "clone"]:
            return MagicMock(returncode=128 if self.fail_clone else 0, stdout="", stderr="")
        if cmd[:3] == ["docker", "images", "-q"]:
            out = "abc123\n" if cmd[3] in self.local_images else ""
            return MagicMock(returncode=0, stdout=out, stderr="")
        if cmd[:2] == ["docker", "pull"]:
            arch = cmd[2][len(IMAGE_PREFIX) :]
            return MagicMock(returncode=1 if arch in self.fail_pull_for else 0, stdout="", stderr="")
        if cmd[:2] == ["docker", "run"]:
            image = next(c for c in cmd if c.startswith(IMAGE_PREFIX))
            arch = image[len(IMAGE_PREFIX) :]
            if self.on_build is not None:
                self.on_build(arch)
            if arch in self.fail_build_for:
                return MagicMock(returncode=2, stdout="", stderr="")
            if arch not in self.no_output_for:
                src = Path(cmd[cmd.index("-v") + 1].rsplit(":", 1)[0])
                write_build_outputs(src, arch)
            return MagicMock(returncode=0, stdout="", stderr="")
        return MagicMock(returncode=0, stdout="", stderr="")

    def commands(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]


def write_build_outputs(source_dir: Path, arch: str, jar: bytes | None = None) -> None:
    lib = source_dir / f"build-{arch}" / "lib" / "libf3d-java.so"
    lib.parent.mkdir(parents=True, exist_ok=True)
    lib.write_bytes(f"ELF {arch}".encode())
    out_jar = source_dir / f"build-{arch}" / "java" / "f3d.jar"
    out_jar.parent.mkdir(parents=True, exist_ok=True)
    out_jar.write_bytes(jar if jar is not None else f"jar from {arch}".encode())


@pytest.fixture
def fake_docker() -> FakeDocker:
    return FakeDocker()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Android project root with an empty app/ dir."""
    root = tmp_path / "android"
    (root / "app").mkdir(parents=True)
    return root


@pytest.fixture
def isolated_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point tempfile at a private dir so leftover temp clones can be counted."""
    d = tmp_path / "tmp"
    d.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(d))
    return d


@pytest.fixture
def build_outputs():
    """write_build_outputs(source_dir, arch, jar=None) as a fixture."""
    return write_build_outputs
