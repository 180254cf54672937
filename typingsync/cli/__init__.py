"""Command line interface for cordova-typings-sync."""

from .main import main

__all__ = ["main"]
