# astrobio_navigator/crossref/pipeline.py

"""
Cross-reference analysis of an uploaded paper.

Stages, strictly in order:

  1. extract keywords + summary from the document (one model call; fatal
     on failure)
  2. rank catalog papers by keyword overlap (pure computation)
  3. extract citations / cross-references for the top candidates (one
     paced model call each; per-paper failures are absorbed)
  4. assemble the AnalysisResult

Nothing is cached between runs: each call builds its own rate limiter and
only reads the catalog snapshot it was given.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from astrobio_navigator.ai.gemini_client import GeminiClient, GeminiClientConfig
from astrobio_navigator.ai.rate_limit import TokenBucket
from astrobio_navigator.catalog.snapshot import CatalogSnapshot
from astrobio_navigator.config.settings import Settings, get_settings
from astrobio_navigator.crossref.citations import CitationExtractor, Limiter
from astrobio_navigator.crossref.keywords import extract_profile
from astrobio_navigator.crossref.scoring import rank_related_papers
from astrobio_navigator.models.analysis import AnalysisResult, UploadedDocument

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    MATCHING = "matching"
    EXTRACTING_CITATIONS = "extracting_citations"
    DONE = "done"
    FAILED = "failed"


class CrossReferencePipeline:
    """
    Orchestrates one analysis per `analyze()` call.

    `stage` reflects the last stage entered by the most recent run and is
    only meant for logging and tests.
    """

    def __init__(
        self,
        client: GeminiClient,
        catalog: CatalogSnapshot,
        *,
        limiter_factory: Optional[Callable[[], Limiter]] = None,
        related_limit: int = 10,
        citation_limit: int = 5,
        backoff_seconds: float = 5.0,
    ) -> None:
        self.client = client
        self.catalog = catalog
        self.limiter_factory = limiter_factory or (lambda: TokenBucket(rate=1.0, capacity=1))
        self.related_limit = related_limit
        self.citation_limit = citation_limit
        self.backoff_seconds = backoff_seconds
        self.stage = PipelineStage.IDLE

    @classmethod
    def from_settings(
        cls,
        catalog: CatalogSnapshot,
        settings: Optional[Settings] = None,
        *,
        client: Optional[GeminiClient] = None,
    ) -> "CrossReferencePipeline":
        s = settings or get_settings()
        if client is None:
            client = GeminiClient(GeminiClientConfig.from_settings(s))

        def make_limiter() -> Limiter:
            return TokenBucket(rate=s.CITATION_CALLS_PER_SECOND, capacity=s.CITATION_BURST)

        return cls(
            client,
            catalog,
            limiter_factory=make_limiter,
            related_limit=s.RELATED_PAPERS_LIMIT,
            citation_limit=s.CITATION_CANDIDATE_LIMIT,
            backoff_seconds=s.CITATION_BACKOFF_SECONDS,
        )

    def analyze(self, document: UploadedDocument) -> AnalysisResult:
        """
        Run the full analysis. Raises ModelCallError / ParseError when the
        keyword extraction fails; never fails after that point.
        """
        logger.info(
            "Starting cross-reference analysis for %s (%d bytes)",
            document.filename or "document",
            document.size,
        )

        self.stage = PipelineStage.EXTRACTING
        try:
            profile = extract_profile(document, self.client)
        except Exception:
            self.stage = PipelineStage.FAILED
            raise

        self.stage = PipelineStage.MATCHING
        related = rank_related_papers(profile.keywords, self.catalog, limit=self.related_limit)
        logger.info("Found %d related papers", len(related))

        self.stage = PipelineStage.EXTRACTING_CITATIONS
        extractor = CitationExtractor(
            self.client,
            self.limiter_factory(),
            candidate_limit=self.citation_limit,
            backoff_seconds=self.backoff_seconds,
        )
        batch = extractor.extract(document, related)

        self.stage = PipelineStage.DONE
        logger.info(
            "Analysis complete. Found %d citations and %d cross-references",
            len(batch.citations),
            len(batch.cross_references),
        )

        return AnalysisResult(
            keywords=profile.keywords,
            summary=profile.summary,
            related_papers=tuple(related),
            citations=tuple(batch.citations),
            cross_references=tuple(batch.cross_references),
            candidate_statuses=tuple(batch.statuses),
        )


def analyze_document(
    document: UploadedDocument,
    catalog: CatalogSnapshot,
    *,
    client: Optional[GeminiClient] = None,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """
    Convenience wrapper: build a pipeline from settings and run it once.
    """
    pipeline = CrossReferencePipeline.from_settings(catalog, settings, client=client)
    return pipeline.analyze(document)
