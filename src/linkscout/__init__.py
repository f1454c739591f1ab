"""
linkscout - Content metadata extraction for activity drafting.

Turns an arbitrary web URL into a normalized metadata record (title,
description, publish date, author, thumbnail and, for YouTube videos, a view
count) using only public, unauthenticated sources.
"""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "linkscout"
__email__ = "noreply@linkscout.dev"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
