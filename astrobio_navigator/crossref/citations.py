# astrobio_navigator/crossref/citations.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.ai.json_parsing import parse_model_output
from astrobio_navigator.ai.schemas import CitationReportOutput
from astrobio_navigator.errors import (
    CitationExtractionWarning,
    ModelCallError,
    ParseError,
)
from astrobio_navigator.models.analysis import (
    CandidateStatus,
    Citation,
    CrossReference,
    RelatedCandidate,
    UploadedDocument,
)

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_LIMIT = 5

CITATION_PROMPT_TEMPLATE = """Analyze this research paper from URL: {link}
Title: {title}

Compare it with the uploaded PDF content and find:
1. Any citations or references to similar research
2. Cross-references or related methodologies
3. Overlapping research topics or findings

Return specific quotes with context. Format as JSON:
{{
  "citations": [
    {{
      "citationText": "exact quote from the paper",
      "context": "surrounding context explaining the citation",
      "lineNumber": "approximate line or section number if identifiable"
    }}
  ],
  "crossReferences": [
    {{
      "citationText": "exact quote showing cross-reference",
      "context": "context explaining how this relates to the uploaded paper"
    }}
  ]
}}
"""


class Limiter(Protocol):
    def acquire(self) -> float:
        ...

    def penalize(self, seconds: float) -> None:
        ...


@dataclass
class CitationBatch:
    citations: List[Citation] = field(default_factory=list)
    cross_references: List[CrossReference] = field(default_factory=list)
    statuses: List[CandidateStatus] = field(default_factory=list)


def build_citation_prompt(candidate: RelatedCandidate) -> str:
    return CITATION_PROMPT_TEMPLATE.format(link=candidate.link, title=candidate.title)


class CitationExtractor:
    """
    Runs one model call per related paper to pull out quoted citations and
    cross-references against the uploaded document.

    Calls are strictly sequential and paced by `limiter`. A failure for one
    paper is logged and recorded on its CandidateStatus; it never stops the
    loop.
    """

    def __init__(
        self,
        client: GeminiClient,
        limiter: Limiter,
        *,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
        backoff_seconds: float = 5.0,
    ) -> None:
        self.client = client
        self.limiter = limiter
        self.candidate_limit = candidate_limit
        self.backoff_seconds = backoff_seconds

    def extract(
        self,
        document: UploadedDocument,
        candidates: Sequence[RelatedCandidate],
    ) -> CitationBatch:
        batch = CitationBatch()

        for candidate in list(candidates)[: self.candidate_limit]:
            logger.info("Analyzing paper for citations: %s", candidate.title)
            self.limiter.acquire()

            try:
                citations, cross_refs = self._extract_one(document, candidate)
            except CitationExtractionWarning as warning:
                logger.warning("%s", warning)
                batch.statuses.append(
                    CandidateStatus(
                        paper_id=candidate.id,
                        paper_title=candidate.title,
                        succeeded=False,
                        reason=warning.reason,
                    )
                )
                continue

            batch.citations.extend(citations)
            batch.cross_references.extend(cross_refs)
            batch.statuses.append(
                CandidateStatus(
                    paper_id=candidate.id,
                    paper_title=candidate.title,
                    succeeded=True,
                    citation_count=len(citations),
                    cross_reference_count=len(cross_refs),
                )
            )

        return batch

    def _extract_one(
        self,
        document: UploadedDocument,
        candidate: RelatedCandidate,
    ):
        try:
            text = self.client.generate(
                build_citation_prompt(candidate),
                document=document,
                json_mode=True,
            )
        except ModelCallError as exc:
            if exc.is_rate_limited:
                self.limiter.penalize(self.backoff_seconds)
            raise CitationExtractionWarning(candidate.id, f"model call failed: {exc}") from exc

        try:
            report = parse_model_output(text, CitationReportOutput)
        except ParseError as exc:
            raise CitationExtractionWarning(candidate.id, f"unparseable response: {exc}") from exc

        citations = [
            Citation(
                paper_title=candidate.title,
                paper_link=candidate.link,
                citation_text=item.citation_text,
                context=item.context,
                line_number=_blank_to_none(item.line_number),
            )
            for item in report.citations
        ]
        cross_refs = [
            CrossReference(
                paper_title=candidate.title,
                paper_link=candidate.link,
                citation_text=item.citation_text,
                context=item.context,
            )
            for item in report.cross_references
        ]
        return citations, cross_refs


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value
