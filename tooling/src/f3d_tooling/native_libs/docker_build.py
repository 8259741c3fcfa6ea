"""Per-ABI F3D build inside the prebuilt ghcr.io/f3d-app/f3d-android-<abi> images."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

from f3d_tooling.native_libs.config import CONTAINER_SRC, NativeLibsConfig
from f3d_tooling.native_libs.process import StepResult, format_command, run_step

log = logging.getLogger(__name__)

# Forwarded by name only; docker picks up the host value when it is set.
FORWARDED_ENV = ("CMAKE_BUILD_PARALLEL_LEVEL",)


def image_present(image: str) -> bool:
    """True when `docker images -q image` lists it locally."""
    r = subprocess.run(
        ["docker", "images", "-q", image],
        capture_output=True,
        text=True,
    )
    present = r.returncode == 0 and bool(r.stdout and r.stdout.strip())
    log.debug("image %s present locally: %s", image, present)
    return present


def ensure_image(config: NativeLibsConfig, arch: str) -> StepResult:
    """Pull the build image for arch unless it is already local (always pull with refresh_images)."""
    image = config.image_for(arch)
    if not config.dry_run and not config.refresh_images and image_present(image):
        print(f"Using local image {image}")
        return StepResult.success()
    print(f"Pulling {image} ...")
    r = run_step(["docker", "pull", image], dry_run=config.dry_run)
    if not r.ok:
        return StepResult.failure(f"Pull of {image} failed for {arch}: {r.detail}")
    return r


def configure_command(config: NativeLibsConfig, arch: str) -> str:
    build_dir = f"{CONTAINER_SRC}/build-{arch}"
    options = " ".join(f"-D{name}={value}" for name, value in config.cmake_options.items())
    return f"cmake -S {CONTAINER_SRC} -B {build_dir} {options}"


def build_command(arch: str) -> str:
    return f"cmake --build {CONTAINER_SRC}/build-{arch}"


def _user_spec() -> str:
    return f"{os.getuid()}:{os.getgid()}"


def docker_run_command(
    config: NativeLibsConfig,
    arch: str,
    source_dir: Path,
    *,
    interactive: bool | None = None,
) -> list[str]:
    """docker run that configures and builds arch with source_dir mounted at /src.

    Runs as the invoking user so build-<arch>/ stays owned by them. -it is only
    added when stdin is a terminal (docker refuses -t otherwise).
    """
    if interactive is None:
        interactive = sys.stdin.isatty()
    cmd = ["docker", "run", "--rm"]
    if interactive:
        cmd.append("-it")
    for name in FORWARDED_ENV:
        cmd.extend(["-e", name])
    cmd.extend(
        [
            "-u",
            _user_spec(),
            "-v",
            f"{source_dir}:{CONTAINER_SRC}",
            config.image_for(arch),
            "sh",
            "-c",
            f"{configure_command(config, arch)} && {build_command(arch)}",
        ]
    )
    return cmd


def build_arch(config: NativeLibsConfig, arch: str, source_dir: Path) -> StepResult:
    """Configure and build arch. On success the shared library must exist at its fixed path.

    A failing container and a missing output are reported with different messages:
    the first is a toolchain failure, the second an upstream layout or option mismatch.
    """
    cmd = docker_run_command(config, arch, source_dir)
    log.debug("build command for %s: %s", arch, format_command(cmd))
    r = run_step(cmd, dry_run=config.dry_run)
    if not r.ok:
        return StepResult.failure(f"Docker build failed for {arch}: {r.detail}")
    if config.dry_run:
        return r
    library = config.library_path(source_dir, arch)
    if not library.is_file():
        return StepResult.failure(f"expected {library} not found after build.")
    return r
