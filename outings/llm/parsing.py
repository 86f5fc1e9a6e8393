from __future__ import annotations

import json
import re
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..errors import UpstreamUnavailable
from .groq_client import TextAnalyzer

T = TypeVar("T")

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _strip_fences(text: str) -> str:
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1) if match else stripped


def parse_json(text: str) -> Any:
    """Decode model output as JSON, tolerating a surrounding markdown fence."""
    try:
        return json.loads(_strip_fences(text))
    except (TypeError, ValueError) as exc:
        raise UpstreamUnavailable(f"Response is not valid JSON: {exc}") from exc


def unwrap_list(payload: Any, key: str) -> Any:
    """Return a list payload, unwrapping ``{key: [...]}`` when JSON mode forced an object."""
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return payload


def validate(payload: Any, target: type[T]) -> T:
    try:
        return TypeAdapter(target).validate_python(payload)
    except ValidationError as exc:
        raise UpstreamUnavailable(f"Response has the wrong shape: {exc}") from exc


def request_json(
    analyzer: TextAnalyzer,
    prompt: str,
    target: type[T],
    list_key: str | None = None,
) -> T:
    """
    Ask the analyzer for JSON and validate it into ``target``.

    Any failure along the way is raised as ``UpstreamUnavailable``.
    """
    try:
        text = analyzer.generate(prompt)
    except UpstreamUnavailable:
        raise
    except Exception as exc:
        raise UpstreamUnavailable(f"Analyzer call failed: {exc}") from exc

    payload = parse_json(text)
    if list_key:
        payload = unwrap_list(payload, list_key)
    return validate(payload, target)
