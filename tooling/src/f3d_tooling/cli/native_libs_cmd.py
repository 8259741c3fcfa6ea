"""`f3d-tooling update-native-libs` — clone F3D, build per ABI in Docker, copy into app/."""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path
from typing import NoReturn

from f3d_tooling.cli.parse_common import (
    UsageError,
    parse_flags_strict,
    path_resolver,
)
from f3d_tooling.native_libs import (
    ALL_ARCHS,
    ConfigError,
    UnsupportedArchError,
    build_config,
    run_update_native_libs,
)
from f3d_tooling.native_libs.config import DEFAULT_BRANCH, DEFAULT_REPO

HELP_FLAGS = ("-h", "--help")
SWITCHES = ("--dry-run", "--refresh-images", "--verbose", *HELP_FLAGS)


def usage() -> str:
    return "\n".join(
        [
            "Usage: f3d-tooling update-native-libs [options]",
            "",
            "Options:",
            f"  --repo <owner/repo>    GitHub repository (default: {DEFAULT_REPO})",
            f"  --branch <name>        Git branch/tag (default: {DEFAULT_BRANCH})",
            "  --clone-dir <path>     Clone directory (default: temporary, removed on exit).",
            "                         If it already contains a git repo, no clone is",
            "                         performed and --repo/--branch are ignored.",
            "  --arch <abi>           ABI to build (repeatable; default: all)",
            "  --project-root <path>  Android project root containing app/ (default: cwd)",
            "  --config <path>        YAML file overriding repo, branch, archs, image, cmake options, layout",
            "  --refresh-images       Always docker pull, even if the image is present",
            "  --dry-run              Print git/docker commands instead of running them",
            "  --verbose              Debug logging",
            "",
            f"Supported ABIs: {' '.join(ALL_ARCHS)}",
        ]
    )


def _usage_exit(error: str | None = None) -> NoReturn:
    if error:
        print(f"Error: {error}", file=sys.stderr)
    print(usage(), file=sys.stderr)
    sys.exit(1)


def _exit_on_sigterm(signum: int, _frame: object) -> NoReturn:
    # SystemExit unwinds through the context managers, so the temp clone is removed.
    print(f"Received signal {signum}; aborting.", file=sys.stderr)
    sys.exit(1)


def run_native_libs_argv(argv: list[str] | None = None) -> None:
    """Parse update-native-libs options and run. argv defaults to sys.argv[2:] when called from main."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    try:
        parsed, switches = parse_flags_strict(
            argv,
            ("repo", "--repo", None, None),
            ("branch", "--branch", None, None),
            ("clone_dir", "--clone-dir", None, path_resolver),
            ("archs", "--arch", list, None),
            ("project_root", "--project-root", Path.cwd, path_resolver),
            ("config_file", "--config", None, path_resolver),
            switches=SWITCHES,
        )
    except UsageError as e:
        _usage_exit(str(e))
    if switches & set(HELP_FLAGS):
        _usage_exit()

    if "--verbose" in switches:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = build_config(
            parsed["project_root"],
            archs=parsed["archs"],
            repo=parsed["repo"],
            branch=parsed["branch"],
            clone_dir=parsed["clone_dir"],
            config_file=parsed["config_file"],
            refresh_images="--refresh-images" in switches,
            dry_run="--dry-run" in switches,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, UnsupportedArchError):
            print(f"Supported: {' '.join(ALL_ARCHS)}", file=sys.stderr)
        sys.exit(1)

    signal.signal(signal.SIGTERM, _exit_on_sigterm)
    rc = run_update_native_libs(config)
    sys.exit(rc)
