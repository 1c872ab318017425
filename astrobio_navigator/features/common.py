# astrobio_navigator/features/common.py

from __future__ import annotations

import logging
from urllib.parse import urlparse

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.errors import InputValidationError, ModelCallError

logger = logging.getLogger(__name__)


def validate_paper_url(paper_url: str) -> str:
    if not paper_url or not paper_url.strip():
        raise InputValidationError("No research paper URL provided")

    paper_url = paper_url.strip()
    parsed = urlparse(paper_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InputValidationError("Invalid research paper URL format")
    return paper_url


def validate_question(question: str) -> str:
    if not question or not question.strip():
        raise InputValidationError("No question provided")
    return question.strip()


def ask_about_url(client: GeminiClient, prompt: str, paper_url: str, *, action: str) -> str:
    """
    Send a prompt with the URL-context tool enabled so the model reads the
    paper page itself. `action` names the feature in error messages.
    """
    full_prompt = f"{prompt}\n\nResearch Paper URL: {paper_url}"
    try:
        text = client.generate(full_prompt, use_url_context=True)
    except ModelCallError as exc:
        raise ModelCallError(
            f"Failed to {action}: {exc}",
            status_code=exc.status_code,
            model=exc.model,
        ) from exc

    if not text.strip():
        raise ModelCallError(f"Failed to {action}: Empty response from model", model=client.model)
    return text
