"""update-native-libs pipeline: provision source, build each ABI in Docker, install artifacts.

Strictly sequential. The first failing step ends the run; ABIs after it are not
attempted and nothing is retried. A temporary source tree is removed however
the run ends.
"""

from __future__ import annotations

import sys

from f3d_tooling.native_libs.config import NativeLibsConfig
from f3d_tooling.native_libs.docker_build import build_arch, ensure_image
from f3d_tooling.native_libs.install import install_bindings, install_library
from f3d_tooling.native_libs.process import StepResult, require_tool
from f3d_tooling.native_libs.source import provisioned_source


def _fail(result: StepResult) -> int:
    print(f"❌ {result.detail}", file=sys.stderr)
    return 1


def _banner(arch: str) -> None:
    print("")
    print("=" * 40)
    print(f" Building for {arch}")
    print("=" * 40)


def run(config: NativeLibsConfig) -> int:
    """Run the whole update for config.archs. Returns 0 or 1."""
    app_dir = config.project_root / "app"
    if not app_dir.is_dir():
        return _fail(
            StepResult.failure(
                f"{app_dir} not found. Run from the Android project root or pass --project-root."
            )
        )
    if not config.dry_run:
        docker = require_tool("docker")
        if not docker.ok:
            return _fail(docker)

    with provisioned_source(config) as (source_dir, provisioned):
        if not provisioned.ok:
            return _fail(provisioned)

        for arch in config.archs:
            _banner(arch)
            r = ensure_image(config, arch)
            if not r.ok:
                return _fail(r)
            r = build_arch(config, arch, source_dir)
            if not r.ok:
                return _fail(r)
            r = install_library(config, arch, source_dir)
            if not r.ok:
                return _fail(r)

        r = install_bindings(config, config.archs[0], source_dir)
        if not r.ok:
            return _fail(r)

    print("")
    print(f"✅ Done. Updated architectures: {' '.join(config.archs)}")
    return 0
