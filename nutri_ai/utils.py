"""Utility functions."""

import json
import logging
import re
from typing import Optional

from nutri_ai.errors import ExtractionError

logger = logging.getLogger(__name__)

# Either a ```json fenced block or the first "{" through the last "}".
# Leftmost match wins.
JSON_CANDIDATE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```|(\{[\s\S]*\})")


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def _fail(reason: str, cause: Optional[Exception] = None) -> ExtractionError:
    logger.error("JSON extraction failed: %s", reason)
    error = ExtractionError()
    error.__cause__ = cause
    return error


def extract_json(text: str) -> dict:
    """
    Locate the JSON object in model output.

    Handles prose around the object and ```json fences. NaN/Infinity are
    rejected like any other invalid JSON.
    Raises ExtractionError if nothing parseable is found.
    """
    if not text:
        raise _fail("empty model output")

    match = JSON_CANDIDATE_RE.search(text)
    candidate = (match.group(1) or match.group(2)) if match else None
    if not candidate:
        raise _fail("no JSON object detected")

    try:
        parsed = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as e:
        raise _fail(str(e), e)

    if not isinstance(parsed, dict):
        raise _fail(f"JSON value is a {type(parsed).__name__}, not an object")

    return parsed
