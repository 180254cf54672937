"""Process lifecycle helpers for the long-running watch command."""

from .signals import SignalHandler

__all__ = ["SignalHandler"]
