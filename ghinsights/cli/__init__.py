"""Command-line interface for ghinsights.

This module provides the CLI that renders a profile summary.
"""

from .main import main

__all__ = ["main"]
