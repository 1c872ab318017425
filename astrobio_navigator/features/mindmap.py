# astrobio_navigator/features/mindmap.py

from __future__ import annotations

import logging

from astrobio_navigator.ai.gemini_client import GeminiClient
from astrobio_navigator.ai.json_parsing import parse_model_output
from astrobio_navigator.ai.schemas import MindmapOutput
from astrobio_navigator.errors import ParseError
from astrobio_navigator.features.common import ask_about_url, validate_paper_url

logger = logging.getLogger(__name__)

MINDMAP_PROMPT = """You are an expert in creating mind maps from research papers.

I have provided you with access to a research paper web page. Please analyze the content and create a mind map structure representing the key concepts and their relationships by:
- Identifying the main research topic as the central node
- Creating nodes for key concepts, methods, findings, and conclusions
- Establishing logical relationships between concepts
- Using hierarchical positioning with the main topic at center
- Including 8-15 nodes for optimal visualization

Return a JSON structure with "nodes" and "edges" arrays:

nodes: Array of objects with:
- id: unique string identifier
- data: { "label": "concept name" }
- position: { "x": number, "y": number } (spread nodes evenly, main topic at 400,200)

edges: Array of objects with:
- id: unique string identifier
- source: source node id
- target: target node id
- label: relationship description (optional)

Ensure the JSON is valid and well-formatted.
"""


def generate_mindmap(client: GeminiClient, paper_url: str) -> MindmapOutput:
    paper_url = validate_paper_url(paper_url)
    logger.info("Generating mind map for %s", paper_url)

    text = ask_about_url(client, MINDMAP_PROMPT, paper_url, action="generate mindmap")
    try:
        mindmap = parse_model_output(text, MindmapOutput)
    except ParseError as exc:
        raise ParseError(f"Failed to generate mindmap: {exc}") from exc

    node_ids = {node.id for node in mindmap.nodes}
    dangling = [e.id for e in mindmap.edges if e.source not in node_ids or e.target not in node_ids]
    if dangling:
        logger.warning("Mind map has edges to unknown nodes: %s", dangling)

    logger.info(
        "Generated mindmap with %d nodes and %d edges",
        len(mindmap.nodes),
        len(mindmap.edges),
    )
    return mindmap
