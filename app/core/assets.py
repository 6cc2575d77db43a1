"""Helpers for building public asset URLs."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

from app.core.config import get_settings


def image_url(filename: Optional[str]) -> Optional[str]:
    """
    Build the public URL for a plant image file name stored in the DB.

    - If `filename` is already an absolute URL, returns it unchanged.
    - If `IMAGE_BASE_URL` is unset, returns the relative `/images/<filename>` path.
    - Otherwise, joins `IMAGE_BASE_URL` with the file name.
    """
    if not filename:
        return None

    value = filename.strip()
    if value.startswith("http://") or value.startswith("https://"):
        return value

    base = (get_settings().IMAGE_BASE_URL or "").strip()
    if not base:
        return f"/images/{value.lstrip('/')}"

    if not base.endswith("/"):
        base = base + "/"

    return urljoin(base, value.lstrip("/"))
