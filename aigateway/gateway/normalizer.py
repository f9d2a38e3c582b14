"""Response Normalizer — repairs raw provider text into parseable JSON.

Providers are not trusted to emit pure JSON. The repair pipeline applies,
in order:
  1. Code-fence stripping (```json ... ``` or bare ```)
  2. Trailing-comma removal before } or ]
  3. Envelope extraction (first "{" through last "}")

Every stage is a pure str → str function and idempotent. This module is
the only path from raw provider text to parsed data; callers should use
:func:`parse_json` or :func:`parse_json_or_default`.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from collections.abc import Callable
from typing import Any

from aigateway.gateway.errors import RepairError

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*(?:\r?\n|$)")
_TRAILING_FENCE = re.compile(r"(?:^|\r?\n)[ \t]*```[ \t]*$")
_TRAILING_COMMA = re.compile(r",\s*([\]}])")


def _until_stable(fn: Callable[[str], str], text: str) -> str:
    """Apply *fn* until the text stops changing."""
    while True:
        result = fn(text)
        if result == text:
            return result
        text = result


def _strip_once(text: str) -> str:
    text = text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def strip_code_fences(text: str) -> str:
    """Remove leading/trailing Markdown code-fence markers."""
    return _until_stable(_strip_once, text)


def remove_trailing_commas(text: str) -> str:
    """Drop any comma that directly precedes a closing ``}`` or ``]``."""
    return _until_stable(lambda t: _TRAILING_COMMA.sub(r"\1", t), text)


def extract_json_envelope(text: str) -> str:
    """Slice from the first ``{`` to the last ``}``; passthrough if absent."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return text
    return text[start : end + 1]


REPAIR_STAGES: tuple[Callable[[str], str], ...] = (
    strip_code_fences,
    remove_trailing_commas,
    extract_json_envelope,
)


def repair_json(text: str) -> str:
    """Run the full repair pipeline. Never raises."""
    if not isinstance(text, str):
        return ""
    for stage in REPAIR_STAGES:
        text = stage(text)
    return text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard constant {name}")


def parse_json(text: str) -> Any:
    """Repair *text* and parse it strictly.

    ``NaN`` and ``Infinity`` are rejected, as in RFC 8259.

    Raises:
        RepairError: the repaired text is still not valid JSON.
    """
    repaired = repair_json(text)
    try:
        return json.loads(repaired, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise RepairError(f"response is not valid JSON after repair: {e.msg} at position {e.pos}", repaired) from e
    except ValueError as e:
        raise RepairError(f"response is not valid JSON after repair: {e}", repaired) from e


def parse_json_or_default(text: str, default: Any) -> tuple[Any, bool]:
    """Parse repaired JSON, substituting *default* on failure.

    Returns ``(data, degraded)``; ``degraded`` is True when the default was used.
    """
    try:
        return parse_json(text), False
    except RepairError as e:
        logger.warning("Falling back to default payload: %s", e)
        return copy.deepcopy(default), True
