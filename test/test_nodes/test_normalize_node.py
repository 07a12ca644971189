# tests/test_nodes/test_normalize_node.py
import json
from typing import Any, Dict

import pytest
from pocketflow import AsyncFlow as Flow

from symptom_chat.runtime.nodes.normalize import NormalizeNode
from symptom_chat.schemas.message import FreeformBody, StructuredBody
from symptom_chat.services.normalizer import APOLOGY_TEXT


async def _run(shared: Dict[str, Any]) -> str:
    node = NormalizeNode()
    node.successors = {}
    return await Flow(start=node).run_async(shared)


@pytest.mark.asyncio
async def test_structured_raw_reply(summary):
    shared: Dict[str, Any] = {"raw_reply": json.dumps(summary)}

    assert await _run(shared) == "ok"
    msg = shared["assistant_message"]
    assert msg.role == "assistant"
    assert isinstance(msg.body, StructuredBody)


@pytest.mark.asyncio
async def test_missing_raw_reply_becomes_apology():
    shared: Dict[str, Any] = {"raw_reply": None}

    await _run(shared)

    body = shared["assistant_message"].body
    assert isinstance(body, FreeformBody)
    assert body.text == APOLOGY_TEXT
