"""Build F3D for Android ABIs in Docker and install libf3d-java.so / f3d.jar into the app."""

from .config import (
    ALL_ARCHS,
    ConfigError,
    NativeLibsConfig,
    UnsupportedArchError,
    build_config,
)
from .process import StepResult
from .update import run as run_update_native_libs

__all__ = [
    "ALL_ARCHS",
    "ConfigError",
    "NativeLibsConfig",
    "StepResult",
    "UnsupportedArchError",
    "build_config",
    "run_update_native_libs",
]
