"""
ignr Command Line Interface
"""

from ignr import __version__

__all__ = ["__version__"]
