# astrobio_navigator/catalog/fields.py

"""
Helpers for the free-text catalog columns (authors, image URLs).
"""

from __future__ import annotations

import re
from typing import List, Tuple

_FIGURE_PATTERN = re.compile(r"\.(g\d+|fig\d+|figure\d+)\.jpg$", re.IGNORECASE)
_JPG_PATTERN = re.compile(r"\.(jpg|jpeg)$", re.IGNORECASE)
_EXCLUDED_MARKERS = ("flag", "icon", "logo", "data:image/svg")


def parse_authors(authors: str) -> List[str]:
    if not authors or not isinstance(authors, str):
        return []
    return [a.strip() for a in authors.split(",") if a.strip()]


def format_authors_for_preview(authors: str, max_authors: int = 2) -> Tuple[str, int]:
    """
    Return (display_text, remaining_count) for a compact author line.
    """
    names = parse_authors(authors)
    if not names:
        return "", 0
    if len(names) <= max_authors:
        return ", ".join(names), 0
    return ", ".join(names[:max_authors]), len(names) - max_authors


def _is_research_image(url: str) -> bool:
    if any(marker in url for marker in _EXCLUDED_MARKERS):
        return False
    if "cdn.ncbi.nlm.nih.gov/pmc/blobs" in url:
        return True
    if "pmc" in url or "pubmed" in url:
        return True
    return bool(_FIGURE_PATTERN.search(url))


def process_image_urls(images: str) -> List[str]:
    """
    Extract research figure URLs from the catalog's images column.

    The column joins URLs with " : " (older rows use ": " or ":").
    """
    if not images or not isinstance(images, str):
        return []

    if " : " in images:
        parts = images.split(" : ")
    elif ": " in images:
        parts = images.split(": ")
    else:
        parts = images.split(":")

    urls = [p.strip() for p in parts]
    urls = [u for u in urls if u and u.startswith("http")]
    jpgs = [u for u in urls if _JPG_PATTERN.search(u)]
    return [u for u in jpgs if _is_research_image(u)]
