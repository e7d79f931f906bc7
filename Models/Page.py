"""
Models/Page.py — A loaded page as held in the browser history.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Page:
    """One entry of the browser's navigation history."""

    url: str
    """Final URL after any redirects."""

    status: int
    """HTTP status code of the response."""

    body: str = ""
    """Decoded response body."""
