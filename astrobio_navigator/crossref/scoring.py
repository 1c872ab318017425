# astrobio_navigator/crossref/scoring.py

"""
Keyword-overlap relevance scoring of catalog papers.

Every keyword is run through the catalog's substring search. The first
time a paper matches, it gets a base score from how many of *all* the
keywords appear in its title (worth more) and content:

    base = min(MAX_BASE_SCORE,
               (title_hits * TITLE_WEIGHT + content_hits * CONTENT_WEIGHT)
               / len(keywords) + BASE_OFFSET)

Each later keyword that matches the same paper adds REPEAT_MATCH_BONUS.
The bonus is not clamped, so a paper that hits the cap on its first match
can end above MAX_BASE_SCORE.

Cost is O(keywords x catalog) substring scans, fine for a catalog of a few
hundred papers. A larger corpus would want an inverted index.
"""

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence

from astrobio_navigator.models.analysis import RelatedCandidate
from astrobio_navigator.models.paper import CatalogEntry

TITLE_WEIGHT = 0.3
CONTENT_WEIGHT = 0.1
BASE_OFFSET = 0.1
MAX_BASE_SCORE = 0.95
REPEAT_MATCH_BONUS = 0.1
DEFAULT_LIMIT = 10


class SearchableCatalog(Protocol):
    def search(self, query: str) -> List[CatalogEntry]:
        ...


def base_relevance_score(entry: CatalogEntry, keywords: Sequence[str]) -> float:
    if not keywords:
        return 0.0

    title = entry.title.lower()
    content = entry.content.lower()

    title_hits = 0
    content_hits = 0
    for kw in keywords:
        needle = kw.lower()
        if needle in title:
            title_hits += 1
        if needle in content:
            content_hits += 1

    raw = (title_hits * TITLE_WEIGHT + content_hits * CONTENT_WEIGHT) / len(keywords)
    return min(MAX_BASE_SCORE, raw + BASE_OFFSET)


def rank_related_papers(
    keywords: Sequence[str],
    catalog: SearchableCatalog,
    limit: int = DEFAULT_LIMIT,
) -> List[RelatedCandidate]:
    """
    Score every catalog paper matched by at least one keyword and return
    the best `limit` of them, highest score first.

    Ties keep first-match order (keyword order, then catalog order).
    """
    candidates: Dict[str, RelatedCandidate] = {}

    for keyword in keywords:
        for entry in catalog.search(keyword):
            existing = candidates.get(entry.id)
            if existing is not None:
                existing.relevance_score += REPEAT_MATCH_BONUS
                existing.matching_keywords.append(keyword)
                continue

            candidates[entry.id] = RelatedCandidate(
                id=entry.id,
                title=entry.title,
                link=entry.link,
                relevance_score=base_relevance_score(entry, keywords),
                matching_keywords=[keyword],
            )

    # sorted() is stable, also with reverse=True
    ranked = sorted(candidates.values(), key=lambda c: c.relevance_score, reverse=True)
    return ranked[:limit]
