# astrobio_navigator/crossref/documents.py

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from astrobio_navigator.errors import InputValidationError
from astrobio_navigator.models.analysis import UploadedDocument

SUPPORTED_MEDIA_TYPES = frozenset({"application/pdf"})


def validate_upload(
    document: Optional[UploadedDocument],
    *,
    max_bytes: int,
    allowed_types: Iterable[str] = SUPPORTED_MEDIA_TYPES,
) -> UploadedDocument:
    """
    Check an upload before it reaches the analysis pipeline.

    The pipeline itself assumes a valid document; the HTTP and CLI layers
    call this first.
    """
    if document is None or not document.content:
        raise InputValidationError("No file uploaded. Please upload a PDF file.")

    if document.media_type not in set(allowed_types):
        raise InputValidationError("Invalid file type. Please upload a PDF file.")

    if document.size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise InputValidationError(
            f"File too large. Please upload a file smaller than {limit_mb}MB.",
            status_code=413,
        )

    return document


def document_from_path(path: Path) -> UploadedDocument:
    """
    Build an UploadedDocument from a file on disk (CLI use).

    The media type comes from the extension; anything other than .pdf is
    left for validate_upload to reject.
    """
    path = Path(path)
    if not path.exists():
        raise InputValidationError(f"File not found: {path}")

    media_type = "application/pdf" if path.suffix.lower() == ".pdf" else "application/octet-stream"
    return UploadedDocument(
        content=path.read_bytes(),
        media_type=media_type,
        filename=path.name,
    )
