"""Tooling for the F3D Android app: native library updates."""

__version__ = "0.1.0"
