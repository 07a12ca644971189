# symptom_chat/runtime/nodes/normalize.py
from __future__ import annotations

from typing import Any, Dict

from pocketflow import AsyncNode

from symptom_chat.services.normalizer import normalize


class NormalizeNode(AsyncNode):
    """Turn the raw model reply into the canonical assistant message.
    - prep_async: pick up raw_reply (None when the model call failed)
    - exec_async: pure normalization, never raises
    - post_async: store the message in shared and route
    """

    async def prep_async(self, shared: Dict[str, Any]) -> Any:
        return shared.get("raw_reply")

    async def exec_async(self, raw: Any) -> Dict[str, Any]:
        return {"message": normalize(raw)}

    async def post_async(self, shared: Dict[str, Any], prep: Any, exec_res: Dict[str, Any]) -> str:
        shared["assistant_message"] = exec_res["message"]
        return "ok"
