# astrobio_navigator/features/narration.py

from __future__ import annotations

import logging

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.features.common import ask_about_url, validate_paper_url

logger = logging.getLogger(__name__)

NARRATION_PROMPT = """You are an expert science communicator creating an engaging audio narration for a research paper.

I have provided you with access to a research paper web page. Please analyze the full content of this research paper and create a compelling audio narration script that:

1. Introduction (30-45 seconds):
   - Hook the listener with the significance of the research
   - Introduce the main research question or problem
   - Explain why this matters in the broader context

2. Methodology (45-60 seconds):
   - Explain the experimental approach in accessible terms
   - Highlight key methods or innovative techniques used
   - Mention important details about subjects, procedures, or data collection

3. Key Findings (60-90 seconds):
   - Present the main results clearly and engagingly
   - Reference important figures, charts, or data when relevant
   - Explain what the numbers and findings actually mean

4. Conclusions & Impact (30-45 seconds):
   - Summarize the key takeaways
   - Explain broader implications for the field
   - Mention potential future research directions or applications

Requirements:
- Write in a conversational, engaging tone suitable for audio
- Use natural speech patterns with smooth transitions
- Make complex concepts accessible without oversimplifying
- Total length should be 3-4 minutes when spoken (approximately 450-600 words)
- Include natural pauses and emphasis cues where appropriate
- Reference specific findings from the paper's content and figures

Please provide ONLY the narration script text, ready to be converted to speech.
"""


def generate_narration_script(client: GeminiClient, paper_url: str) -> str:
    """
    Write a spoken-style narration script for the paper at `paper_url`.

    Only the script is produced; turning it into audio is left to the caller.
    """
    paper_url = validate_paper_url(paper_url)
    logger.info("Generating narration script for %s", paper_url)

    script = ask_about_url(client, NARRATION_PROMPT, paper_url, action="generate narration script")
    logger.info("Generated narration script of %d words", len(script.split()))
    return script.strip()
