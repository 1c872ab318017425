# astrobio_navigator/features/summary.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.features.common import ask_about_url, validate_paper_url

logger = logging.getLogger(__name__)


class ComplexityLevel(str, Enum):
    EXPERT = "Expert"
    STUDENT = "Student"
    ELI10 = "ELI10"


class LearningStyle(str, Enum):
    TEXT = "text"
    VISUAL = "visual"
    AUDIO = "audio"


@dataclass(frozen=True)
class UserProfile:
    age: int
    experience_level: str
    learning_style: LearningStyle


SUMMARY_PROMPT = """You are an expert AI assistant that generates summaries of research papers.

I have provided you with access to a research paper web page. Please analyze the content of this research paper and create a comprehensive summary at the {level} level by:
1. Analyzing both the text content and any images, figures, charts, or diagrams in the document
2. Extracting key findings, methodology, and conclusions
3. Identifying important visual data representations
{profile}
Please provide a comprehensive summary that captures:
- Main research objectives and hypotheses
- Methodology and experimental design
- Key findings from both text and visual elements
- Statistical results and data interpretations
- Conclusions and implications
- Any notable figures, charts, or diagrams that support the findings

Focus on making the summary appropriate for the {level} level while maintaining scientific accuracy.
"""

PROFILE_BLOCK = """
The user requesting this summary has the following profile, take it into account when generating the summary to personalize it to them:
Age: {age}
Experience Level: {experience_level}
Learning Style: {learning_style}
"""


def build_summary_prompt(level: ComplexityLevel, user_profile: Optional[UserProfile] = None) -> str:
    profile = ""
    if user_profile is not None:
        profile = PROFILE_BLOCK.format(
            age=user_profile.age,
            experience_level=user_profile.experience_level,
            learning_style=LearningStyle(user_profile.learning_style).value,
        )
    return SUMMARY_PROMPT.format(level=ComplexityLevel(level).value, profile=profile)


def generate_summary(
    client: GeminiClient,
    paper_url: str,
    complexity_level: ComplexityLevel = ComplexityLevel.STUDENT,
    user_profile: Optional[UserProfile] = None,
) -> str:
    paper_url = validate_paper_url(paper_url)
    logger.info("Generating %s summary for %s", ComplexityLevel(complexity_level).value, paper_url)

    summary = ask_about_url(
        client,
        build_summary_prompt(complexity_level, user_profile),
        paper_url,
        action="generate summary",
    )
    logger.info("Generated summary of %d characters", len(summary))
    return summary
