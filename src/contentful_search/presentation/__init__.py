"""
Presentation Layer - terminal views and CLI.
"""

from .cli import main

__all__ = ["main"]
