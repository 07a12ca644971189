# symptom_chat/services/context.py
from __future__ import annotations

import json
from typing import List, Sequence

from symptom_chat.schemas.message import ContextTurn, Message, StructuredBody

DEFAULT_CONTEXT_LIMIT = 8


def flatten(message: Message) -> str:
    if isinstance(message.body, StructuredBody):
        return json.dumps(
            message.body.data.to_wire(), ensure_ascii=False, separators=(",", ":")
        )
    return message.body.text


def build_context(
    messages: Sequence[Message], limit: int = DEFAULT_CONTEXT_LIMIT
) -> List[ContextTurn]:
    """Last `limit` messages as {role, text} pairs, oldest first.

    Structured turns are sent back as their JSON so the model sees its own
    prior answer verbatim. System entries and blank texts are left out.
    """
    if limit <= 0:
        return []
    window: List[ContextTurn] = []
    for m in list(messages)[-limit:]:
        if m.role == "system":
            continue
        text = flatten(m)
        if not text.strip():
            continue
        window.append(ContextTurn(role=m.role, text=text))
    return window
