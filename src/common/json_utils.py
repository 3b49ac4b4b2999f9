"""
JSON utilities for LLM response parsing.

LLM replies are asked to be strict JSON but routinely arrive wrapped in
markdown fences, with single quotes or trailing commas. ``parse_llm_json``
recovers those with json-repair; ``extract_json_fields`` is the last resort
for replies too broken to repair.
"""

import json
import re
from typing import Any, Dict, Iterable


def parse_llm_json(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object from an LLM response.

    Args:
        text: Raw LLM response text that may contain JSON

    Returns:
        Parsed dictionary

    Raises:
        ValueError: If no JSON object can be extracted or repaired

    Example:
        >>> parse_llm_json('```json\\n{"name": "Anna"}\\n```')
        {'name': 'Anna'}
        >>> parse_llm_json("{'name': 'Anna',}")
        {'name': 'Anna'}
    """
    if not text or not text.strip():
        raise ValueError("Empty input: no JSON content to parse")

    json_str = _strip_markdown_blocks(text.strip())
    json_str = _extract_json_object(json_str)

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError:
        parsed = _repair(json_str, text)

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _repair(json_str: str, original: str) -> Any:
    from json_repair import repair_json

    try:
        repaired = repair_json(json_str, return_objects=True)
    except Exception as e:
        raise ValueError(
            f"Failed to parse or repair JSON: {e}\n"
            f"Original text (first 500 chars): {original[:500]}"
        ) from e

    if isinstance(repaired, list):
        # Several objects in one reply get merged; the first key wins
        merged: Dict[str, Any] = {}
        for item in repaired:
            if isinstance(item, dict):
                for key, value in item.items():
                    merged.setdefault(key, value)
        if not merged:
            raise ValueError(f"json_repair returned no objects: {repaired[:3]}")
        return merged
    if isinstance(repaired, str):
        if not repaired:
            raise ValueError(f"json_repair could not recover: {original[:200]}")
        return json.loads(repaired)
    return repaired


def extract_json_fields(text: str, fields: Iterable[str]) -> Dict[str, str]:
    """
    Pull ``"field": "value"`` pairs out of text that is not valid JSON.

    Missing fields are omitted from the result.

    Example:
        >>> extract_json_fields('name: "Anna", "company" : "Klarna"', ["name", "company"])
        {'name': 'Anna', 'company': 'Klarna'}
    """
    found: Dict[str, str] = {}
    for field_name in fields:
        match = re.search(
            rf'{re.escape(field_name)}"?\s*:\s*"([^"]+)"', text or "", re.IGNORECASE
        )
        if match:
            found[field_name] = match.group(1).strip()
    return found


def _strip_markdown_blocks(text: str) -> str:
    """Remove ```json ... ``` or ``` ... ``` wrappers."""
    result = text

    if result.startswith("```json"):
        result = result[7:]
    elif result.startswith("```"):
        result = result[3:]

    if result.endswith("```"):
        result = result[:-3]

    return result.strip()


def _extract_json_object(text: str) -> str:
    """
    Return the ``{...}`` span of ``text``.

    Raises:
        ValueError: If no JSON object pattern is found
    """
    text = text.strip()
    if text.startswith("{"):
        return text

    json_match = re.search(r'\{.*\}', text, re.DOTALL)
    if json_match:
        return json_match.group(0)

    raise ValueError(f"No JSON object found in text: {text[:200]}")
