"""
Models/Submission.py — Record of one form submission made through the browser.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Submission:
    """What was sent for a single click/submit and what came back."""

    method: str
    """``GET`` or ``POST``."""

    url: str
    """Final request URL (including the query string for ``GET``)."""

    enctype: str
    """Encoding type the pairs were sent with."""

    pairs: list[tuple[str, str]] = field(default_factory=list)
    """Ordered ``(name, value)`` data set, clicked button last."""

    status: int = 0
    """HTTP status code of the response (0 until a response arrives)."""

    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    """ISO-8601 UTC timestamp of the request."""
