"""Utilities for pulling a JSON array out of a free-form LLM response."""

from __future__ import annotations
import json
import re
from typing import Any, Optional

from utils.errors import GenerationError

_FENCED_JSON = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_FENCED_ANY = re.compile(r"```[A-Za-z0-9_-]*\s*(.*?)\s*```", re.DOTALL)


def _fenced_block(text: str) -> Optional[str]:
    """Body of the first ```json fence, else of the first plain ``` fence."""
    m = _FENCED_JSON.search(text) or _FENCED_ANY.search(text)
    return m.group(1) if m else None


def _bracketed_array(text: str) -> Optional[str]:
    """
    First balanced top-level [...] in the text. Brackets inside JSON string
    literals are ignored so question text like "arr[i]" does not end the scan.
    """
    start = text.find("[")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # unbalanced from this opening bracket; try the next one
        start = text.find("[", start + 1)
    return None


def extract_json_array(text: str) -> list[Any]:
    """
    Extract and parse a JSON array from an LLM response.
    Order of attempt: fenced block, then a bracket-matched bare array.
    Raises GenerationError when nothing parseable is found.
    """
    if not text or not text.strip():
        raise GenerationError("Empty response from provider")

    candidates = []
    fenced = _fenced_block(text)
    if fenced:
        candidates.append(fenced)
    bare = _bracketed_array(fenced or text)
    if bare and bare not in candidates:
        candidates.append(bare)
    if fenced:
        outer = _bracketed_array(text)
        if outer and outer not in candidates:
            candidates.append(outer)

    if not candidates:
        raise GenerationError(f"No JSON found in response: {text[:100]!r}")

    last_error: Optional[Exception] = None
    for block in candidates:
        try:
            data = json.loads(block)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        if isinstance(data, list):
            return data
        last_error = ValueError(f"Expected a JSON array, got {type(data).__name__}")

    raise GenerationError(f"Response is not a valid JSON array: {last_error}")
