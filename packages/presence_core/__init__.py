"""Public API for presence process composition."""

from packages.presence_core.main import build_app, instantiate_components, main

__all__ = [
    "build_app",
    "instantiate_components",
    "main",
]
