# symptom_chat/services/turns.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

import httpx

from symptom_chat.runtime.nodes.model_chat import compose_messages
from symptom_chat.schemas.message import ContextTurn, StructuredBody
from symptom_chat.services.normalizer import normalize
from symptom_chat.services.ollama_client import OllamaClient, OllamaError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong"


def history_to_context(prior_history: Sequence[Mapping[str, Any]]) -> List[ContextTurn]:
    """Caller-supplied {role, content} pairs as context turns.

    System entries and blank or non-string contents are dropped; the caller
    has already bounded the history.
    """
    turns: List[ContextTurn] = []
    for item in prior_history or []:
        role = item.get("role")
        content = item.get("content")
        if role not in ("user", "assistant") or not isinstance(content, str):
            continue
        if not content.strip():
            continue
        turns.append(ContextTurn(role=role, text=content))
    return turns


async def handle_turn(
    user_text: str,
    prior_history: Sequence[Mapping[str, Any]],
    *,
    client: OllamaClient,
) -> Dict[str, Any]:
    """One stateless turn: {"structured": ...} | {"reply": html} | {"error": msg}."""
    messages = compose_messages(user_text, history_to_context(prior_history))
    try:
        raw = await client.chat(messages)
    except (OllamaError, httpx.HTTPError) as e:
        # internal detail stays in the log
        logger.error("upstream model call failed: %s", e)
        return {"error": GENERIC_ERROR}

    message = normalize(raw)
    if isinstance(message.body, StructuredBody):
        return {"structured": message.body.data.to_wire()}
    return {"reply": message.body.text}
