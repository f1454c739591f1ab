"""
CLI interface module for linkscout.

Provides a Typer-based command-line interface for extracting metadata from
a single URL.
"""

from __future__ import annotations

__all__: list[str] = []
