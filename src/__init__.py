# src/__init__.py — v1
"""defview: live definition preview pipeline."""

from defview.version import __version__

__all__ = ["__version__"]
