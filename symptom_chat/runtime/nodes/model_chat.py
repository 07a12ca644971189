# symptom_chat/runtime/nodes/model_chat.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from pocketflow import AsyncNode

from symptom_chat.schemas.message import ContextTurn
from symptom_chat.services.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a careful, evidence-informed medical assistant. "
    "You are not a doctor and this is not medical advice; encourage consulting a qualified "
    "clinician, especially for red-flag symptoms. "
    "Return ONLY a JSON object with this exact shape and no extra text:\n"
    '{"possibilities": [{"title": string, "description": string, "risk": "low"|"medium"|"high"}], '
    '"nextSteps": string[], "clarifyingQuestions": string[], "severity": number, "chips": string[]}\n'
    "- Provide 3-5 possibilities with concise descriptions and appropriate risk.\n"
    "- Provide 3-6 next steps, practical and safe.\n"
    "- Ask 1-3 clarifying questions.\n"
    "- Calibrate severity conservatively (0 minimal, 100 critical).\n"
    "- Keep chips short (1-2 words)."
)


def compose_messages(user_text: str, context: Sequence[ContextTurn]) -> List[Dict[str, str]]:
    """System prompt, then prior turns oldest-first, then the new input."""
    messages: List[Dict[str, str]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages.extend(turn.to_request() for turn in context)
    messages.append({"role": "user", "content": user_text})
    return messages


class ModelChatNode(AsyncNode):
    """LLM call with clean prep/exec/post lifecycle.
    - prep_async: build request messages from context + resolve client
    - exec_async: call the model (no side-effects)
    - post_async: hand the raw reply (or None on failure) to the next node
    """

    def __init__(self, *, temperature: float = 0.2, response_format: str | None = "json", **kwargs) -> None:
        super().__init__(**kwargs)
        self.temperature = temperature
        self.response_format = response_format

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        user_text = str(shared.get("user_text") or "")
        # the caller owns the client and closes it
        client: OllamaClient = shared["model_client"]
        return {
            "messages": compose_messages(user_text, shared.get("context") or []),
            "client": client,
            "temperature": self.temperature,
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        client: OllamaClient = prep["client"]
        raw = await client.chat(
            prep["messages"],
            response_format=self.response_format,
            temperature=prep["temperature"],
        )
        return {"raw": raw}

    async def exec_fallback_async(self, prep: Dict[str, Any], exc: Exception) -> Dict[str, Any]:
        logger.warning("model call failed: %s", exc)
        return {"raw": None, "error": str(exc), "degraded": True}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        shared["raw_reply"] = exec_res["raw"]
        shared["upstream_failed"] = bool(exec_res.get("degraded"))
        return "ok"
