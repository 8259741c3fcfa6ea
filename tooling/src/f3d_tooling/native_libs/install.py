"""Copy build outputs into the Android project (jniLibs/<abi>/ and app/libs/)."""

from __future__ import annotations

import shutil
from pathlib import Path

from f3d_tooling.helpers import human_size
from f3d_tooling.native_libs.config import NativeLibsConfig
from f3d_tooling.native_libs.process import StepResult


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def install_library(config: NativeLibsConfig, arch: str, source_dir: Path) -> StepResult:
    """Copy build-<arch>/lib/<library> to <jni_libs_dir>/<arch>/, overwriting."""
    src = config.library_path(source_dir, arch)
    dest_dir = config.jni_libs_dir / arch
    dst = dest_dir / config.layout["library_name"]
    if config.dry_run:
        print(f"[dry-run] would copy {src} -> {dst}")
        return StepResult.success()
    if not src.is_file():
        return StepResult.failure(f"expected {src} not found after build.")
    dest_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    size = human_size(dst.stat().st_size)
    print(f"📦 Copied {dst.name} ({size}) -> {_relative(dest_dir, config.project_root)}/")
    return StepResult.success()


def install_bindings(config: NativeLibsConfig, arch: str, source_dir: Path) -> StepResult:
    """Copy the bindings archive from build-<arch>/ to <libs_dir>/.

    The archive is taken from a single ABI on the assumption that it does not
    depend on the target architecture. Nothing checks that assumption.
    """
    src = config.bindings_path(source_dir, arch)
    dst = config.libs_dir / config.layout["bindings_name"]
    if config.dry_run:
        print(f"[dry-run] would copy {src} -> {dst}")
        return StepResult.success()
    if not src.is_file():
        return StepResult.failure(f"expected {src} not found after build.")
    config.libs_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    print(f"📦 Copied {dst.name} (from {arch}) -> {_relative(config.libs_dir, config.project_root)}/")
    return StepResult.success()
