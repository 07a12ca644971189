# symptom_chat/services/normalizer.py
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from symptom_chat.schemas.message import Message, StructuredResponse
from symptom_chat.services.markup import render_markup

logger = logging.getLogger(__name__)

APOLOGY_TEXT = (
    "Sorry, I'm having trouble generating a response right now. "
    "Please try again soon."
)

_LIST_KEYS = ("possibilities", "nextSteps", "clarifyingQuestions")
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.S)


def _has_shape(data: Any) -> bool:
    if not isinstance(data, Mapping):
        return False
    if any(not isinstance(data.get(k), list) for k in _LIST_KEYS):
        return False
    sev = data.get("severity")
    if isinstance(sev, bool) or not isinstance(sev, (int, float)):
        return False
    return math.isfinite(sev)


def decode_structured(data: Any) -> Optional[StructuredResponse]:
    """Return a StructuredResponse when `data` has the summary shape, else None.

    The check is structural: the three list fields and a finite numeric
    severity must be present; anything else is ignored or repaired.
    """
    if not _has_shape(data):
        return None
    try:
        return StructuredResponse.model_validate(dict(data))
    except ValidationError as exc:
        logger.debug("structured shape present but undecodable: %s", exc)
        return None


def parse_json_text(text: str) -> Any:
    """json.loads that tolerates a surrounding ``` fence; None when unparsable."""
    s = text.strip()
    m = _FENCE_RE.match(s)
    if m:
        s = m.group(1).strip()
    try:
        return json.loads(s)
    except ValueError:
        return None


def _as_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return json.dumps(raw, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(raw)


def normalize(raw: Any) -> Message:
    """Classify a raw model reply into a canonical assistant Message.

    Cascade:
      1. mapping with the summary shape      -> structured
      2. string holding such a JSON object   -> structured
      3. anything else                       -> rendered freeform text
      4. no payload at all (None / blank)    -> freeform apology
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return Message.freeform("assistant", APOLOGY_TEXT)

    if isinstance(raw, Mapping):
        data = decode_structured(raw)
        if data is not None:
            return Message.structured("assistant", data)

    if isinstance(raw, str):
        data = decode_structured(parse_json_text(raw))
        if data is not None:
            return Message.structured("assistant", data)

    return Message.freeform("assistant", render_markup(_as_text(raw)))
