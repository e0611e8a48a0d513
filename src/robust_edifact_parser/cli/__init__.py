"""Command-line interface module for Robust EDIFACT Parser.

This module provides CLI tools for batch parsing and validation of EDIFACT
interchange files.
"""

from .main import main

__all__ = ["main"]
