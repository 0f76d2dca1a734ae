"""
leakskit CLI module.

This module provides the command-line interface for leakskit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
