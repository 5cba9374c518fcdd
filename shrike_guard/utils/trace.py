"""Trace identifier generation for Shrike Guard.

Every scan request carries an ``X-Shrike-Request-ID`` header so a blocked or
failed call can be correlated with the scan service's own records. The value
is a random UUID version 4, freshly generated per request unless the caller
supplies one.
"""

from __future__ import annotations

import uuid


def generate_trace_id() -> str:
    """Generate a new trace id as a lowercase, hyphenated UUID4 string.

    Returns:
        str: 36-character UUID4 (e.g. ``"3f1c2a9e-8b7d-4c1e-9f0a-2b3c4d5e6f70"``).
    """
    return str(uuid.uuid4())
