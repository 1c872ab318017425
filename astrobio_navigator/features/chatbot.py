# astrobio_navigator/features/chatbot.py

from __future__ import annotations

import logging

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.features.common import ask_about_url, validate_paper_url, validate_question

logger = logging.getLogger(__name__)

CHATBOT_PROMPT = """You are a helpful chatbot assistant that answers questions about research papers.

I have provided you with access to a research paper web page. Please analyze the content and based on this research paper, answer the following question:

Question: {question}

Guidelines for your response:
- Use information directly from the research paper to answer the question
- Be accurate and cite specific findings, methods, or conclusions when relevant
- If the answer cannot be found in the research paper, clearly state that the information is not available in this paper
- Provide a helpful and informative response that addresses the user's question
- Keep the response concise but thorough
- Use scientific language appropriate for the context
"""


def answer_question(client: GeminiClient, paper_url: str, question: str) -> str:
    paper_url = validate_paper_url(paper_url)
    question = validate_question(question)
    logger.info("Answering question about %s: %s", paper_url, question)

    answer = ask_about_url(
        client,
        CHATBOT_PROMPT.format(question=question),
        paper_url,
        action="generate chatbot response",
    )
    logger.info("Generated chatbot answer of %d characters", len(answer))
    return answer
