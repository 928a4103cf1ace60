"""
Clone or update the repositories listed in a security-insights manifest.
"""

from .version import __version__

__all__ = ["__version__"]
