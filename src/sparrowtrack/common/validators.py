from __future__ import annotations

from typing import Optional


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Strip an email identifier; blank or missing becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def clean_notes(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()
