# astrobio_navigator/ai/schemas.py

"""
Schemas for the JSON objects we ask the model to return.

Prompts describe the keys in camelCase; the aliases accept both that and
snake_case so a model that "helpfully" renames keys still validates.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _ModelOutput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Cross-reference analysis
# ---------------------------------------------------------------------------

class KeywordProfileOutput(_ModelOutput):
    keywords: List[str]
    summary: str

    @field_validator("keywords")
    @classmethod
    def _strip_keywords(cls, value: List[str]) -> List[str]:
        return [kw.strip() for kw in value if kw and kw.strip()]


class CitationItem(_ModelOutput):
    citation_text: str
    context: str = ""
    line_number: Optional[str] = None

    @field_validator("line_number", mode="before")
    @classmethod
    def _line_number_as_text(cls, value):
        # models often answer with a bare integer
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CrossReferenceItem(_ModelOutput):
    citation_text: str
    context: str = ""


class CitationReportOutput(_ModelOutput):
    citations: List[CitationItem] = Field(default_factory=list)
    cross_references: List[CrossReferenceItem] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _require_a_report_key(cls, data):
        # an object with neither list is some other answer, not an empty report
        if isinstance(data, dict) and not (
            {"citations", "crossReferences", "cross_references"} & data.keys()
        ):
            raise ValueError("expected \"citations\" or \"crossReferences\"")
        return data


# ---------------------------------------------------------------------------
# Paper features
# ---------------------------------------------------------------------------

class QuizQuestion(_ModelOutput):
    question: str
    options: List[str]
    answer: str


class QuizOutput(_ModelOutput):
    quiz: List[QuizQuestion]


class MindmapNodeData(_ModelOutput):
    label: str


class MindmapPosition(_ModelOutput):
    x: float
    y: float


class MindmapNode(_ModelOutput):
    id: str
    type: Optional[str] = None
    data: MindmapNodeData
    position: MindmapPosition


class MindmapEdge(_ModelOutput):
    id: str
    source: str
    target: str
    label: Optional[str] = None


class MindmapOutput(_ModelOutput):
    nodes: List[MindmapNode]
    edges: List[MindmapEdge]
