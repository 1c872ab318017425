# astrobio_navigator/features/quiz.py

from __future__ import annotations

import logging

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.ai.json_parsing import parse_model_output
from astrobio_navigator.ai.schemas import QuizOutput
from astrobio_navigator.errors import ParseError
from astrobio_navigator.features.common import ask_about_url, validate_paper_url

logger = logging.getLogger(__name__)

QUIZ_PROMPT = """You are an expert quiz generator specializing in creating quizzes from research papers.

I have provided you with access to a research paper web page. Please analyze the content and create a quiz with 4-6 multiple-choice questions based on the research paper content by:
- Focusing on key findings, methodology, and conclusions
- Creating questions at different difficulty levels
- Ensuring each question has 4 possible answers with only one correct answer
- Making questions that test understanding, not just memorization
- Covering different aspects of the paper (background, methods, results, conclusions)

Return the quiz as a JSON structure with the following format:

{
  "quiz": [
    {
      "question": "What was the main objective of this research?",
      "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
      "answer": "Option 2"
    }
  ]
}

Ensure the JSON is valid and well-formatted. The "answer" field should contain the exact text of the correct option.
"""


def generate_quiz(client: GeminiClient, paper_url: str) -> QuizOutput:
    paper_url = validate_paper_url(paper_url)
    logger.info("Generating quiz for %s", paper_url)

    text = ask_about_url(client, QUIZ_PROMPT, paper_url, action="generate quiz")
    try:
        quiz = parse_model_output(text, QuizOutput)
    except ParseError as exc:
        raise ParseError(f"Failed to generate quiz: {exc}") from exc

    for question in quiz.quiz:
        if question.answer not in question.options:
            logger.warning("Quiz answer is not one of its options: %r", question.question)

    logger.info("Generated quiz with %d questions", len(quiz.quiz))
    return quiz
