# =============================================================
# boundary.py
# =============================================================
"""Multipart boundary resolution from a Content-Type value."""
from __future__ import annotations

import re
from typing import Optional

# Quoted form wins over the bare token form. The parameter name is matched
# case-insensitively, the boundary value itself is returned verbatim.
BOUNDARY_PATTERNS = (
    re.compile(r'boundary="([^"]+)"', re.IGNORECASE),
    re.compile(r"boundary=([^;\s]+)", re.IGNORECASE),
)


def is_multipart(content_type: str) -> bool:
    return "multipart" in content_type.lower()


def resolve_boundary(content_type: str) -> Optional[str]:
    """Return the ``boundary`` parameter of ``content_type`` or ``None``."""
    for pattern in BOUNDARY_PATTERNS:
        match = pattern.search(content_type)
        if match:
            return match.group(1)
    return None
