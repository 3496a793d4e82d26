"""
JSON extraction for free-text model output.

Structured-output calls return validated objects directly. These helpers
cover the calls that come back as text:
- Clean JSON
- JSON in ```json blocks (or unlabelled ``` blocks)
- JSON embedded in prose
"""

import json
import re
from typing import Any

FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)\s*```")


def extract_json(text: str, expect_array: bool = False) -> dict | list | None:
    """
    Extract JSON from a model response using multiple strategies.

    Args:
        text: Raw model response text
        expect_array: If True, prefer a JSON array; otherwise prefer an object

    Returns:
        Parsed JSON (dict or list) or None if extraction fails
    """
    if not text or not text.strip():
        return None

    fallback = None
    for candidate in _candidates(text, expect_array):
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, list if expect_array else dict):
            return result
        # Valid JSON of the other shape - keep looking, remember it
        if fallback is None and isinstance(result, (dict, list)) and result:
            fallback = result

    return fallback


def _candidates(text: str, expect_array: bool):
    """Yield substrings that may hold JSON, most specific first."""
    yield text.strip()

    for match in FENCE_PATTERN.findall(text):
        yield match.strip()

    brackets = [("[", "]"), ("{", "}")]
    if not expect_array:
        brackets.reverse()
    for open_char, close_char in brackets:
        start = text.find(open_char)
        if start == -1:
            continue
        balanced = _extract_balanced(text, start, open_char, close_char)
        if balanced:
            yield balanced


def _extract_balanced(text: str, start: int, open_char: str, close_char: str) -> str | None:
    """Return the bracketed span starting at `start`, ignoring brackets inside strings."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None


def parse_evaluation_response(text: str) -> dict | None:
    """
    Parse a free-text CV evaluation into the final-evaluation shape.

    Returns dict with: overall_rating, summary, key_strengths,
    key_improvement_areas, criterion_ratings; or None when no usable JSON
    object is found.
    """
    data = extract_json(text, expect_array=False)
    if not isinstance(data, dict):
        return None

    # Some models wrap the payload
    for key in ("evaluation", "final_evaluation", "result"):
        if isinstance(data.get(key), dict):
            data = data[key]
            break

    ratings = data.get("criterion_ratings") or data.get("criteria") or data.get("ratings") or []
    if not isinstance(ratings, list):
        return None

    return {
        "overall_rating": _number(data.get("overall_rating", data.get("rating", data.get("score")))),
        "summary": data.get("summary", "") or data.get("overall_summary", ""),
        "key_strengths": _string_list(data.get("key_strengths") or data.get("strengths")),
        "key_improvement_areas": _string_list(
            data.get("key_improvement_areas") or data.get("improvement_areas") or data.get("weaknesses")
        ),
        "criterion_ratings": [_normalize_criterion(r) for r in ratings if isinstance(r, dict)],
    }


def _normalize_criterion(data: dict) -> dict:
    """Normalize one criterion rating to expected schema."""
    name = data.get("criterion_name", "") or data.get("name", "") or data.get("criterion", "")
    criterion_id = data.get("criterion_id", "") or data.get("id", "") or re.sub(r"\W+", "_", name.lower()).strip("_")
    return {
        "criterion_id": criterion_id,
        "criterion_name": name,
        "rating": _number(data.get("rating", data.get("score"))),
        "reasoning": data.get("reasoning", "") or data.get("comment", ""),
        "suggestions": _string_list(data.get("suggestions")),
    }


def _number(value: Any) -> float | None:
    """Coerce '7', '7/10', 7.5 to a float; None if no number is present."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = re.search(r"\d+(?:\.\d+)?", value)
        if match:
            return float(match.group())
    return None


def _string_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value if v]
