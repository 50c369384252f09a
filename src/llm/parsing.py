"""Strict parsing of provider JSON output.

Providers are told to return a bare JSON object. The only decoration
tolerated is a single markdown fence around it (```` ```json ```` or
```` ``` ````); any other prose makes the response unparseable.
"""
import json
import re
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.shared.errors import ParseError

T = TypeVar("T", bound=BaseModel)

_LEADING_FENCE_RE = re.compile(r"^```(?:json)?\n?")
_TRAILING_FENCE_RE = re.compile(r"\n?```$")


def parse_json_response(text: str) -> Dict[str, Any]:
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        cleaned = _LEADING_FENCE_RE.sub("", cleaned, count=1)
        cleaned = _TRAILING_FENCE_RE.sub("", cleaned, count=1)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"Provider response is not valid JSON: {e}", raw=text) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Provider response must be a JSON object, got {type(data).__name__}", raw=text
        )
    return data


def parse_structured_response(text: str, schema: Type[T]) -> T:
    """Parse ``text`` and validate it against ``schema``'s required fields."""
    data = parse_json_response(text)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ParseError(
            f"Provider response does not match {schema.__name__}: {', '.join(missing)}",
            raw=text,
        ) from e
