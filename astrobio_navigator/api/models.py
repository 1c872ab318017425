# astrobio_navigator/api/models.py

from __future__ import annotations

from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel, Field

from astrobio_navigator.ai.schemas import MindmapEdge, MindmapNode, QuizQuestion
from astrobio_navigator.catalog.fields import (
    format_authors_for_preview,
    parse_authors,
    process_image_urls,
)
from astrobio_navigator.features.summary import ComplexityLevel, LearningStyle
from astrobio_navigator.models.analysis import AnalysisResult
from astrobio_navigator.models.paper import CatalogEntry


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class PaperSummary(BaseModel):
    """
    Compact paper card for catalog listings.
    """
    id: str = Field(..., description="Catalog id of the paper.")
    title: str = Field(..., description="Title of the paper.")
    link: str = Field("", description="URL of the paper page.")
    authors_preview: str = Field("", description="First authors, comma separated.")
    more_authors: int = Field(0, ge=0, description="How many authors are not shown.")

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "PaperSummary":
        preview, remaining = format_authors_for_preview(entry.authors)
        return cls(
            id=entry.id,
            title=entry.title,
            link=entry.link,
            authors_preview=preview,
            more_authors=remaining,
        )


class PaperDetail(BaseModel):
    id: str
    title: str
    link: str
    pdf_link: str
    content: str
    authors: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "PaperDetail":
        return cls(
            id=entry.id,
            title=entry.title,
            link=entry.link,
            pdf_link=entry.pdf_link,
            content=entry.content,
            authors=parse_authors(entry.authors),
            image_urls=process_image_urls(entry.images),
        )


class CatalogReloadResult(BaseModel):
    source: str
    paper_count: int


# ---------------------------------------------------------------------------
# Cross-reference analysis
# ---------------------------------------------------------------------------

class RelatedPaperModel(BaseModel):
    id: str
    title: str
    link: str
    relevance_score: float = Field(..., ge=0.0, description="Keyword-overlap relevance.")
    matching_keywords: List[str] = Field(default_factory=list)


class CitationModel(BaseModel):
    paper_title: str
    paper_link: str
    citation_text: str
    context: str
    line_number: Optional[str] = None


class CrossReferenceModel(BaseModel):
    paper_title: str
    paper_link: str
    citation_text: str
    context: str


class CandidateStatusModel(BaseModel):
    paper_id: str
    paper_title: str
    succeeded: bool
    reason: Optional[str] = None
    citation_count: int = 0
    cross_reference_count: int = 0


class AnalysisResponse(BaseModel):
    """
    Serialized AnalysisResult returned by POST /analyze/pdf.
    """
    keywords: List[str]
    summary: str
    related_papers: List[RelatedPaperModel] = Field(default_factory=list)
    citations: List[CitationModel] = Field(default_factory=list)
    cross_references: List[CrossReferenceModel] = Field(default_factory=list)
    candidate_statuses: List[CandidateStatusModel] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls(**asdict(result))


# ---------------------------------------------------------------------------
# Paper features
# ---------------------------------------------------------------------------

class UserProfileModel(BaseModel):
    age: int = Field(..., ge=0)
    experience_level: str
    learning_style: LearningStyle


class SummaryRequest(BaseModel):
    paper_url: str
    complexity_level: ComplexityLevel = ComplexityLevel.STUDENT
    user_profile: Optional[UserProfileModel] = None


class SummaryResponse(BaseModel):
    summary: str


class PaperUrlRequest(BaseModel):
    paper_url: str


class QuizResponse(BaseModel):
    quiz: List[QuizQuestion]


class MindmapResponse(BaseModel):
    nodes: List[MindmapNode]
    edges: List[MindmapEdge]


class NarrationResponse(BaseModel):
    narration_script: str


class ChatRequest(BaseModel):
    paper_url: str
    question: str


class ChatResponse(BaseModel):
    answer: str
