"""Ordered strategies for pulling a JSON array out of free-form model text.

Each strategy returns a list on success or None to let the next one try.
"""

import json
import re
from collections.abc import Callable, Sequence
from typing import Any

from batchrecord.extraction.exceptions import ExtractionParseError
from batchrecord.logging.logger import Log

ParseStrategy = Callable[[str], list[Any] | None]

_FENCED_JSON = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_THREE_OBJECTS = re.compile(
    r"\[\s*\{.*?\}\s*,\s*\{.*?\}\s*,\s*\{.*?\}\s*\]",
    re.DOTALL,
)


def _load_array(candidate: str) -> list[Any] | None:
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if isinstance(parsed, dict):
        return [parsed]
    if isinstance(parsed, list):
        return parsed
    return None


def parse_fenced_block(reply: str) -> list[Any] | None:
    match = _FENCED_JSON.search(reply)
    if match is None:
        return None
    return _load_array(match.group(1))


def parse_whole_reply(reply: str) -> list[Any] | None:
    return _load_array(reply.strip())


def parse_bracketed_objects(reply: str) -> list[Any] | None:
    match = _THREE_OBJECTS.search(reply)
    if match is None:
        return None
    return _load_array(match.group(0))


PARSE_STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_fenced_block,
    parse_whole_reply,
    parse_bracketed_objects,
)


def parse_reply(
    reply: str,
    strategies: Sequence[ParseStrategy] = PARSE_STRATEGIES,
) -> list[Any]:
    """Return the first array any strategy can read from the reply.

    Raises:
        ExtractionParseError: if no strategy succeeds.
    """
    for strategy in strategies:
        items = strategy(reply)
        if items is not None:
            Log.debug(f"Model reply parsed by {strategy.__name__}")
            return items
    raise ExtractionParseError("Could not parse structured data from the model reply")
