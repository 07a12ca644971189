# symptom_chat/runtime/nodes/context.py
from __future__ import annotations

from typing import Any, Dict

from pocketflow import AsyncNode

from symptom_chat.services.context import DEFAULT_CONTEXT_LIMIT, build_context


class ContextNode(AsyncNode):
    """
    Build the bounded context window from the current session.
    - prep_async: snapshot the store's messages (the new input is not in it yet)
    - exec_async: pure compute (build_context)
    - post_async: write the window back to shared and route
    """

    def __init__(self, *, limit: int = DEFAULT_CONTEXT_LIMIT, **kwargs) -> None:
        super().__init__(**kwargs)
        self.limit = limit

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        store = shared["store"]
        return {
            "messages": store.messages,
            "limit": int(shared.get("context_limit") or self.limit),
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        return {"context": build_context(prep["messages"], prep["limit"])}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        shared["context"] = exec_res["context"]
        return "ok"
