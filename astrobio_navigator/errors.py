# astrobio_navigator/errors.py

from __future__ import annotations

from typing import Optional


class AstroBioError(RuntimeError):
    """
    Base class for every error raised by this package.
    """


class InputValidationError(AstroBioError):
    """
    Caller-side input problem: wrong file type, oversized upload, bad URL,
    empty question. Raised by validators before any model call is made.
    """

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ModelCallError(AstroBioError):
    """
    A call to the generative model failed (network, auth, quota).

    status_code carries the HTTP status reported by the API when known,
    e.g. 429 for rate limiting.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        model: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.model = model

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class ParseError(AstroBioError):
    """
    The model answered, but the answer did not contain a usable JSON object.
    """


class CatalogError(AstroBioError):
    """
    The paper catalog could not be fetched or parsed.
    """


class CitationExtractionWarning(AstroBioError):
    """
    Per-candidate citation extraction failure.

    Never propagates out of the pipeline: it is logged and recorded on the
    candidate's status instead.
    """

    def __init__(self, paper_id: str, reason: str) -> None:
        super().__init__(f"Citation extraction failed for {paper_id}: {reason}")
        self.paper_id = paper_id
        self.reason = reason
