"""Defaults and the immutable run configuration for update-native-libs.

Optional YAML config file format (all keys optional):
- repo: GitHub repository in owner/name form
- branch: branch or tag to clone
- archs: list of ABIs to build
- image_template: Docker image name with an {arch} placeholder
- cmake_options: map option name -> ON/OFF (bools accepted), merged over the defaults
- layout: destination dirs and artifact names, see DEFAULT_LAYOUT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from f3d_tooling.helpers import is_repo_slug

ALL_ARCHS: tuple[str, ...] = ("arm64-v8a", "armeabi-v7a", "x86_64", "x86")

DEFAULT_REPO = "f3d-app/f3d"
DEFAULT_BRANCH = "master"
REPO_URL_TEMPLATE = "https://github.com/{repo}.git"
IMAGE_TEMPLATE = "ghcr.io/f3d-app/f3d-android-{arch}"

# Source tree is mounted at /src inside the build image.
CONTAINER_SRC = "/src"

CMAKE_OPTIONS: dict[str, str] = {
    "F3D_MODULE_EXR": "ON",
    "F3D_MODULE_UI": "OFF",
    "F3D_MODULE_WEBP": "ON",
    "F3D_PLUGINS_STATIC_BUILD": "ON",
    "F3D_PLUGIN_BUILD_ALEMBIC": "ON",
    "F3D_PLUGIN_BUILD_ASSIMP": "ON",
    "F3D_PLUGIN_BUILD_DRACO": "ON",
    "F3D_PLUGIN_BUILD_HDF": "OFF",
    "F3D_PLUGIN_BUILD_OCCT": "ON",
    "F3D_PLUGIN_BUILD_WEBIFC": "ON",
    "F3D_STRICT_BUILD": "ON",
    "F3D_BINDINGS_JAVA": "ON",
}

# Paths are relative to project_root (jni_libs_dir, libs_dir) or to build-<arch> (subpaths).
DEFAULT_LAYOUT: dict[str, str] = {
    "jni_libs_dir": "app/src/main/jniLibs",
    "libs_dir": "app/libs",
    "library_subpath": "lib",
    "library_name": "libf3d-java.so",
    "bindings_subpath": "java",
    "bindings_name": "f3d.jar",
}


class ConfigError(ValueError):
    """Invalid configuration: unsupported ABI, malformed config file, bad value type."""


class UnsupportedArchError(ConfigError):
    """An ABI outside ALL_ARCHS was requested."""


def resolve_layout(layout: dict[str, Any] | None) -> dict[str, str]:
    """Return layout dict with defaults filled. Unknown keys are ignored."""
    if layout is None:
        return dict(DEFAULT_LAYOUT)
    out = dict(DEFAULT_LAYOUT)
    out.update({k: str(v) for k, v in layout.items() if k in out})
    return out


def _cmake_value(value: Any) -> str:
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    return str(value)


def resolve_cmake_options(overrides: dict[str, Any] | None) -> dict[str, str]:
    """Merge overrides over CMAKE_OPTIONS, keeping the default order for known options."""
    out = dict(CMAKE_OPTIONS)
    for name, value in (overrides or {}).items():
        out[str(name)] = _cmake_value(value)
    return out


def validate_archs(archs: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Default to ALL_ARCHS when empty; drop duplicates keeping order. Raises ConfigError on unknown ABI."""
    if not archs:
        return ALL_ARCHS
    seen: list[str] = []
    for arch in archs:
        if arch not in ALL_ARCHS:
            msg = f"unsupported ABI '{arch}'."
            raise UnsupportedArchError(msg)
        if arch not in seen:
            seen.append(arch)
    return tuple(seen)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load the optional YAML config. Raises ConfigError if unreadable or not a mapping."""
    import yaml

    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except OSError as e:
        msg = f"cannot read config file {path}: {e.strerror or e}"
        raise ConfigError(msg) from e
    except yaml.YAMLError as e:
        msg = f"invalid YAML in {path}: {e}"
        raise ConfigError(msg) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"config file {path} must contain a mapping at the top level"
        raise ConfigError(msg)
    for key in ("cmake_options", "layout"):
        if data.get(key) is not None and not isinstance(data[key], dict):
            msg = f"'{key}' in {path} must be a mapping"
            raise ConfigError(msg)
    archs = data.get("archs")
    if archs is not None and not isinstance(archs, list):
        msg = f"'archs' in {path} must be a list"
        raise ConfigError(msg)
    return data


@dataclass(frozen=True)
class NativeLibsConfig:
    """Everything one update-native-libs run needs; built once, passed to each stage."""

    project_root: Path
    archs: tuple[str, ...] = ALL_ARCHS
    repo: str = DEFAULT_REPO
    branch: str = DEFAULT_BRANCH
    clone_dir: Path | None = None
    image_template: str = IMAGE_TEMPLATE
    cmake_options: dict[str, str] = field(default_factory=lambda: dict(CMAKE_OPTIONS))
    layout: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LAYOUT))
    refresh_images: bool = False
    dry_run: bool = False

    @property
    def repo_url(self) -> str:
        return REPO_URL_TEMPLATE.format(repo=self.repo)

    def image_for(self, arch: str) -> str:
        return self.image_template.format(arch=arch)

    @property
    def jni_libs_dir(self) -> Path:
        return self.project_root / self.layout["jni_libs_dir"]

    @property
    def libs_dir(self) -> Path:
        return self.project_root / self.layout["libs_dir"]

    def library_path(self, source_dir: Path, arch: str) -> Path:
        """Where the build leaves the shared library for arch."""
        return (
            source_dir
            / f"build-{arch}"
            / self.layout["library_subpath"]
            / self.layout["library_name"]
        )

    def bindings_path(self, source_dir: Path, arch: str) -> Path:
        """Where the build leaves the bindings archive for arch."""
        return (
            source_dir
            / f"build-{arch}"
            / self.layout["bindings_subpath"]
            / self.layout["bindings_name"]
        )


def build_config(
    project_root: Path,
    *,
    archs: list[str] | None = None,
    repo: str | None = None,
    branch: str | None = None,
    clone_dir: Path | None = None,
    config_file: Path | None = None,
    refresh_images: bool = False,
    dry_run: bool = False,
) -> NativeLibsConfig:
    """Merge defaults <- YAML config file <- explicit arguments. Raises ConfigError."""
    data = load_config_file(config_file) if config_file is not None else {}

    file_archs = [str(a) for a in data.get("archs") or []]
    image_template = str(data.get("image_template") or IMAGE_TEMPLATE)
    if "{arch}" not in image_template:
        msg = f"image_template must contain '{{arch}}': {image_template}"
        raise ConfigError(msg)
    try:
        image_template.format(arch=ALL_ARCHS[0])
    except (KeyError, IndexError, ValueError) as e:
        msg = f"image_template may only use the {{arch}} placeholder: {image_template}"
        raise ConfigError(msg) from e

    resolved_repo = repo or str(data.get("repo") or DEFAULT_REPO)
    if not is_repo_slug(resolved_repo):
        msg = f"repo must be in owner/repo form, got '{resolved_repo}'"
        raise ConfigError(msg)

    return NativeLibsConfig(
        project_root=project_root,
        archs=validate_archs(archs or file_archs),
        repo=resolved_repo,
        branch=branch or str(data.get("branch") or DEFAULT_BRANCH),
        clone_dir=clone_dir,
        image_template=image_template,
        cmake_options=resolve_cmake_options(data.get("cmake_options")),
        layout=resolve_layout(data.get("layout")),
        refresh_images=refresh_images,
        dry_run=dry_run,
    )
