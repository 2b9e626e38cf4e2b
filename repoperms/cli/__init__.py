"""Command-line interface for repoperms."""

from repoperms import __version__

__all__ = ["__version__"]
