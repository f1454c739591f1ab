"""
Configuration management module for linkscout.

Handles application settings loaded from environment variables, including
network timeouts and response size caps.
"""

from __future__ import annotations

__all__: list[str] = []
