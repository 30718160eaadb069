"""
ignr - auto-detect languages/tools and generate .gitignore files.
"""

__version__ = "0.1.0"
APP_NAME = "ignr"

__all__ = ["__version__", "APP_NAME"]
