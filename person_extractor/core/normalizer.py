# person_extractor/core/normalizer.py
"""
Recover JSON from raw LLM output and coerce it into a list of person records.

Parsing runs an ordered tuple of pure strategies; the first one that yields a
value wins. Each strategy returns NO_PARSE when it does not apply or fails.
"""
import json
import re
from typing import Any, Callable, List, Optional, Tuple

from person_extractor.utils.exceptions import UnparsableResponseError

NO_PARSE = object()

WRAPPER_KEYS = ("persons", "people", "data")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_FENCE_MARKER = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return NO_PARSE


def _defenced(text: str) -> Optional[str]:
    """Content of the first fenced block, or the text with fence markers stripped; None without fences."""
    if "```" not in text:
        return None
    match = _FENCED_BLOCK.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return _FENCE_MARKER.sub("", text).strip()


def parse_whole(text: str) -> Any:
    return _loads(text)


def parse_fenced(text: str) -> Any:
    cleaned = _defenced(text)
    if cleaned is None:
        return NO_PARSE
    return _loads(cleaned)


def parse_delimited(text: str) -> Any:
    """Parse from the first opening bracket to the last closing one when the text starts with it."""
    cleaned = _defenced(text)
    cleaned = (cleaned if cleaned is not None else text).strip()

    for opener, closer in (("{", "}"), ("[", "]")):
        if cleaned.startswith(opener):
            end = cleaned.rfind(closer)
            if end == -1:
                return NO_PARSE
            return _loads(cleaned[cleaned.find(opener):end + 1])
    return NO_PARSE


PARSE_STRATEGIES: Tuple[Callable[[str], Any], ...] = (
    parse_whole,
    parse_fenced,
    parse_delimited,
)


def extract_json(raw_text: Optional[str]) -> Any:
    """
    Extract JSON from text that may carry markdown fences or surrounding chatter.

    Raises:
        UnparsableResponseError: every strategy failed; carries the raw text.
    """
    if isinstance(raw_text, str) and raw_text.strip():
        for strategy in PARSE_STRATEGIES:
            value = strategy(raw_text)
            if value is not NO_PARSE:
                return value

    raise UnparsableResponseError(raw_text)


def normalize_persons(data: Any) -> List[Any]:
    """
    Coerce parsed JSON into a list of person records.

    A list is used as-is, a wrapper object yields its persons/people/data list,
    null yields an empty list, and anything else is treated as one record.
    """
    if data is None:
        return []

    if isinstance(data, list):
        return data

    if isinstance(data, dict):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]

    return [data]


def normalize_response(raw_text: Optional[str]) -> List[Any]:
    return normalize_persons(extract_json(raw_text))
