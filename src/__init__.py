# src/__init__.py - v2
"""leaseorganizer: classify, cache and group lease documents."""

from leaseorganizer.version import __version__

__all__ = ["__version__"]
