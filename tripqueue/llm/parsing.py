# tripqueue/llm/parsing.py
"""
JSON extraction from model output.

Models are told to answer with a bare JSON array but often wrap it in prose
or markdown fences; the fallback pulls out the first balanced array.
"""

import json
from typing import Any

from tripqueue.errors import MalformedOutputError


def extract_first_json_array(text: str) -> str:
    """
    Return the substring from the first ``[`` to its matching ``]``.

    Brackets are counted naively; brackets inside JSON strings are not skipped.

    Raises:
        MalformedOutputError: If there is no ``[`` or it is never closed
    """
    start = text.find("[")
    if start == -1:
        raise MalformedOutputError("No JSON array start found")

    depth = 0
    for i in range(start, len(text)):
        char = text[i]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    raise MalformedOutputError("No matching ] found for JSON array")


def parse_generation_output(raw: str) -> Any:
    """
    Parse model output as JSON, falling back to the first embedded array.

    Raises:
        MalformedOutputError: If neither the whole text nor the extracted
            span is valid JSON
    """
    trimmed = raw.strip()
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError:
        pass

    span = extract_first_json_array(trimmed)
    try:
        return json.loads(span)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"Extracted JSON array is invalid: {e.msg}") from e
