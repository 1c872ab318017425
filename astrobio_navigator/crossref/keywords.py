# astrobio_navigator/crossref/keywords.py

from __future__ import annotations

import logging

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.ai.json_parsing import parse_model_output
from astrobio_navigator.ai.schemas import KeywordProfileOutput
from astrobio_navigator.errors import ModelCallError, ParseError
from astrobio_navigator.models.analysis import ExtractedProfile, UploadedDocument

logger = logging.getLogger(__name__)

EXTRACTION_FAILED = "Failed to extract keywords from document"

KEYWORD_PROMPT = """Analyze this research paper PDF and extract:
1. A comprehensive list of 15-20 relevant keywords that could be used to find related research papers
2. A brief summary (2-3 sentences) of the main research topic and findings

Focus on scientific terms, methodologies, research topics, and key concepts.
Return the response in this exact JSON format:
{
  "keywords": ["keyword1", "keyword2", ...],
  "summary": "Brief summary of the paper"
}
"""


def extract_profile(document: UploadedDocument, client: GeminiClient) -> ExtractedProfile:
    """
    Ask the model for keywords + a short summary of the uploaded document.

    Raises ModelCallError if the call fails and ParseError if the answer
    holds no usable JSON object. Both are fatal for the analysis.
    """
    logger.info("Extracting keywords and summary from %s", document.filename or "document")

    try:
        text = client.generate(KEYWORD_PROMPT, document=document, json_mode=True)
    except ModelCallError as exc:
        raise ModelCallError(
            f"{EXTRACTION_FAILED}: {exc}",
            status_code=exc.status_code,
            model=exc.model,
        ) from exc

    try:
        parsed = parse_model_output(text, KeywordProfileOutput)
    except ParseError as exc:
        logger.error("Error parsing keyword extraction response: %s", exc)
        raise ParseError(EXTRACTION_FAILED) from exc

    if not 15 <= len(parsed.keywords) <= 20:
        logger.info("Model returned %d keywords (asked for 15-20)", len(parsed.keywords))

    logger.info("Extracted keywords: %s", parsed.keywords)
    return ExtractedProfile(keywords=tuple(parsed.keywords), summary=parsed.summary)
