# astrobio_navigator/models/analysis.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class UploadedDocument:
    """
    A single uploaded file, held in memory for one pipeline run only.
    """
    content: bytes
    media_type: str = "application/pdf"
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractedProfile:
    keywords: Tuple[str, ...]
    summary: str


@dataclass
class RelatedCandidate:
    """
    A catalog entry that matched at least one extracted keyword.

    Mutable while the ranking step accumulates matches; treated as
    read-only once it is part of an AnalysisResult.
    """
    id: str
    title: str
    link: str
    relevance_score: float
    matching_keywords: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Citation:
    paper_title: str
    paper_link: str
    citation_text: str
    context: str
    line_number: Optional[str] = None


@dataclass(frozen=True)
class CrossReference:
    paper_title: str
    paper_link: str
    citation_text: str
    context: str


@dataclass(frozen=True)
class CandidateStatus:
    """
    Outcome of citation extraction for one related paper.

    A failed candidate contributes no citations; `reason` says why.
    """
    paper_id: str
    paper_title: str
    succeeded: bool
    reason: Optional[str] = None
    citation_count: int = 0
    cross_reference_count: int = 0


@dataclass(frozen=True)
class AnalysisResult:
    keywords: Tuple[str, ...]
    summary: str
    related_papers: Tuple[RelatedCandidate, ...]
    citations: Tuple[Citation, ...]
    cross_references: Tuple[CrossReference, ...]
    candidate_statuses: Tuple[CandidateStatus, ...] = ()
