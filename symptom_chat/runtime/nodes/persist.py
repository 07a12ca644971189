# symptom_chat/runtime/nodes/persist.py
from __future__ import annotations

from typing import Any, Dict, List

from pocketflow import AsyncNode

from symptom_chat.schemas.message import Message


class PersistNode(AsyncNode):
    """
    Append the turn to the session store.
    - prep_async: snapshot inputs (no side-effects)
    - exec_async: compute the ordered write plan (no side-effects)
    - post_async: append user message then assistant message; each append persists
    """

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "store": shared["store"],
            "user_text": str(shared.get("user_text", "")),
            "assistant_message": shared["assistant_message"],
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        plan: List[Message] = [
            Message.freeform("user", prep["user_text"]),
            prep["assistant_message"],
        ]
        return {"plan": plan}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        store = prep["store"]
        results = [await store.append(m) for m in exec_res["plan"]]
        shared["persisted"] = all(r.ok for r in results)
        shared["last_persist_count"] = len(results)
        return "ok"
