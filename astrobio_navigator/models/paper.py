# astrobio_navigator/models/paper.py

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    """
    One row of the paper catalog. Read-only for the whole application.
    """
    id: str
    title: str
    content: str
    link: str
    pdf_link: str = ""
    images: str = ""
    authors: str = ""
