"""
Version helpers for the normalizer packages.

- Exposes __version__ (PEP 440 when installed from a distribution).
- Best-effort detection from:
    1) NORMALIZER_VERSION env var (authoritative override)
    2) installed distribution metadata
    3) fallback DEFAULT_VERSION

This module has **no external dependencies** and is safe to import very early.
"""

from __future__ import annotations

import os
from importlib import metadata
from typing import Optional

DISTRIBUTION = "chain-op-normalizer"

# Project default if neither env nor metadata is available
DEFAULT_VERSION = "0.1.0"


def _installed_version() -> Optional[str]:
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


def resolve_version() -> str:
    """
    Determine the version string in priority:
      1) NORMALIZER_VERSION environment variable (verbatim)
      2) installed distribution metadata
      3) DEFAULT_VERSION
    """
    env = os.getenv("NORMALIZER_VERSION")
    if env:
        return env.strip()
    return _installed_version() or DEFAULT_VERSION


__version__ = resolve_version()


def describe() -> str:
    """Human-friendly description, e.g. "chain-op-normalizer 0.1.0"."""
    return f"{DISTRIBUTION} {__version__}"


if __name__ == "__main__":
    print(__version__)
