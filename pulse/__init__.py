"""Pulse — AI news importance scoring and ranking."""

from pulse.version import __version__

__all__ = ["__version__"]
