"""Text utilities"""

import re
from typing import Optional


def normalize_text(text: Optional[str]) -> Optional[str]:
    """
    Normalize text

    - Strip leading/trailing whitespace
    - Collapse runs of whitespace into one space
    """
    if not text:
        return None

    text = re.sub(r"\s+", " ", text)
    text = text.strip()

    return text if text else None


def to_slug(text: str) -> str:
    """
    Lowercase slug for use in filenames

    Whitespace becomes ``_`` and path separators are dropped, e.g.
    ``"New York"`` -> ``"new_york"``.
    """
    normalized = normalize_text(text) or ""
    slug = normalized.lower().replace(" ", "_")
    return re.sub(r"[\\/:*?\"<>|]", "", slug)
