# astrobio_navigator/catalog/loader.py

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Optional

import requests

from astrobio_navigator.catalog.snapshot import CatalogSnapshot
from astrobio_navigator.config.settings import Settings, get_settings
from astrobio_navigator.errors import CatalogError
from astrobio_navigator.models.paper import CatalogEntry

logger = logging.getLogger(__name__)


# Spreadsheet header -> CatalogEntry field. Unknown headers are lower-cased.
HEADER_MAP: Dict[str, str] = {
    "Title": "title",
    "Link": "link",
    "id": "id",
    "content": "content",
    "PDF Link": "pdf_link",
    "Image": "images",
    "Images": "images",
    "image": "images",
    "images": "images",
    "Author": "authors",
    "Authors": "authors",
    "author": "authors",
    "authors": "authors",
}

FALLBACK_ENTRIES: List[CatalogEntry] = [
    CatalogEntry(
        id="ID00001",
        title="Mice in Bion-M 1 space mission: training and selection",
        link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC4136787/",
        content=(
            "Research paper about mice experiments in the Bion-M 1 biosatellite "
            "mission focusing on biomedical research in space conditions."
        ),
        pdf_link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC4136787/pdf/pone.0104830.pdf",
    ),
    CatalogEntry(
        id="ID00002",
        title=(
            "Microgravity induces pelvic bone loss through osteoclastic activity, "
            "osteocytic osteolysis, and osteoblastic cell cycle inhibition by CDKN1a/p21"
        ),
        link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC3630201/",
        content=(
            "Study on bone loss mechanisms in microgravity conditions affecting "
            "osteoclasts, osteoblasts, and osteocytes."
        ),
        pdf_link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC3630201/pdf/pone.0061372.pdf",
    ),
    CatalogEntry(
        id="ID00003",
        title="Stem Cell Health and Tissue Regeneration in Microgravity",
        link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC11988870/",
        content=(
            "Comprehensive review on microgravity effects on stem cells, immune "
            "system, tissue regeneration, and cellular responses."
        ),
        pdf_link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC11988870/pdf/ijms-26-03058.pdf",
    ),
]


def _normalize_header(header: str) -> str:
    header = (header or "").strip()
    return HEADER_MAP.get(header, header.lower())


def parse_catalog_csv(csv_text: str) -> List[CatalogEntry]:
    """
    Parse the catalog CSV export into CatalogEntry records.

    - Rows with neither a title nor an id are skipped.
    - Missing ids become "paper-<n>", n being the 1-based position among
      the kept rows.
    """
    reader = csv.reader(io.StringIO(csv_text))
    try:
        raw_headers = next(reader)
    except StopIteration:
        logger.warning("Catalog CSV is empty")
        return []

    headers = [_normalize_header(h) for h in raw_headers]

    entries: List[CatalogEntry] = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue

        row: Dict[str, str] = {}
        for key, value in zip(headers, values):
            # first non-empty column wins when several headers map to one field
            if value and not row.get(key):
                row[key] = value

        if not (row.get("title") or row.get("id")):
            continue

        entries.append(
            CatalogEntry(
                id=row.get("id") or f"paper-{len(entries) + 1}",
                title=row.get("title") or "Untitled",
                link=row.get("link", ""),
                content=row.get("content", ""),
                pdf_link=row.get("pdf_link") or row.get("pdflink", ""),
                images=row.get("images", ""),
                authors=row.get("authors", ""),
            )
        )

    return entries


def fetch_catalog_csv(url: str, timeout: float = 30.0) -> str:
    try:
        resp = requests.get(url, headers={"Cache-Control": "no-cache"}, timeout=timeout)
    except requests.RequestException as exc:
        raise CatalogError(f"Error fetching catalog from {url}: {exc}") from exc

    if not resp.ok:
        raise CatalogError(f"Catalog source returned HTTP {resp.status_code} for {url}")

    return resp.text


def load_catalog(
    settings: Optional[Settings] = None,
    *,
    csv_path: Optional[Path] = None,
    use_fallback: bool = True,
) -> CatalogSnapshot:
    """
    Load a fresh CatalogSnapshot.

    Priority:
    - explicit csv_path argument
    - settings.CATALOG_CSV_PATH
    - settings.CATALOG_CSV_URL

    On any failure we log and fall back to the built-in entries unless
    use_fallback is False, in which case CatalogError propagates.
    """
    s = settings or get_settings()
    path = csv_path or s.CATALOG_CSV_PATH

    try:
        if path is not None:
            path = Path(path)
            if not path.exists():
                raise CatalogError(f"Catalog CSV not found: {path}")
            entries = parse_catalog_csv(path.read_text(encoding="utf-8"))
            source = str(path)
        else:
            entries = parse_catalog_csv(
                fetch_catalog_csv(s.CATALOG_CSV_URL, timeout=s.CATALOG_TIMEOUT_SECONDS)
            )
            source = s.CATALOG_CSV_URL
    except (CatalogError, csv.Error, OSError) as exc:
        if not use_fallback:
            raise CatalogError(str(exc)) from exc
        logger.exception("Failed to load paper catalog; using fallback entries")
        return CatalogSnapshot(FALLBACK_ENTRIES, source="fallback")

    logger.info("Loaded %d papers from %s", len(entries), source)
    return CatalogSnapshot(entries, source=source)
