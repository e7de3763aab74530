"""
normcore — shared model, errors, logging and configuration for the operation
normalizer.

This package exposes only lightweight metadata at import time. Builders live in
the chain-family packages (`evmops`, `eventops`) and should be imported from there.
"""

from .version import __version__, describe

__all__ = ["__version__", "describe"]
