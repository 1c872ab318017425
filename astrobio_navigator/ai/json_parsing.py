# astrobio_navigator/ai/json_parsing.py

"""
Turn free-form model output into validated JSON objects.

Model calls that support it run in JSON response mode, so the strict
`json.loads` path is the normal case. Responses from tool-enabled calls
(URL context) can't use JSON mode and often wrap the object in prose or
a markdown fence; `extract_first_json_object` is the one fallback for those.
"""

from __future__ import annotations

import json
from json import JSONDecodeError
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from astrobio_navigator.errors import ParseError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_json_object(content: str) -> Dict[str, Any]:
    """Parse possibly noisy model output into a JSON object."""
    if not content or not content.strip():
        raise ParseError("Model returned an empty response")

    try:
        parsed = json.loads(content)
    except JSONDecodeError:
        parsed = extract_first_json_object(content)

    if not isinstance(parsed, dict):
        raise ParseError("Expected a JSON object in model response")
    return parsed


def extract_first_json_object(content: str) -> Dict[str, Any]:
    """
    Extract the first decodable JSON object from an arbitrary string.

    When a `{...}` span fails to decode, scanning resumes after its closing
    brace, so a nested object of a malformed answer is never returned in
    its place.
    """
    decoder = json.JSONDecoder()
    closing: Optional[Dict[int, int]] = None
    index = content.find("{")
    while index != -1:
        try:
            candidate, _ = decoder.raw_decode(content, index)
        except JSONDecodeError:
            if closing is None:
                closing = _matching_braces(content)
            end = closing.get(index)
            index = content.find("{", end if end is not None else index + 1)
            continue
        if isinstance(candidate, dict):
            return candidate
        index = content.find("{", index + 1)
    raise ParseError("Could not find a JSON object in model response")


def _matching_braces(content: str) -> Dict[int, int]:
    """
    Map each balanced `{` position to the index just past its `}`.

    Quotes only count inside braces, so prose around the JSON can't flip
    the string state.
    """
    closing: Dict[int, int] = {}
    open_at: List[int] = []
    in_string = False
    escaped = False
    for pos, char in enumerate(content):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"' and open_at:
            in_string = True
        elif char == "{":
            open_at.append(pos)
        elif char == "}" and open_at:
            closing[open_at.pop()] = pos + 1
    return closing


def parse_model_output(content: str, schema: Type[SchemaT]) -> SchemaT:
    """
    Parse `content` and validate it against a pydantic schema.

    Both a missing object and a schema mismatch surface as ParseError.
    """
    data = parse_json_object(content)
    try:
        return schema.model_validate(data)
    except SchemaValidationError as exc:
        raise ParseError(
            f"Model response did not match {schema.__name__}: "
            f"{exc.error_count()} validation error(s)"
        ) from exc
