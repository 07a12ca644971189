# tests/test_flow.py
import json
from typing import Any, Dict

import pytest

from symptom_chat.runtime.flow import make_symptom_flow
from symptom_chat.runtime.nodes.model_chat import SYSTEM_PROMPT
from symptom_chat.schemas.message import FreeformBody, StructuredBody
from symptom_chat.services.normalizer import APOLOGY_TEXT
from symptom_chat.services.ollama_client import OllamaError
from symptom_chat.services.session_store import SessionStore


@pytest.mark.asyncio
async def test_two_turns_carry_structured_context(fake_repo, make_client, summary):
    client = make_client(json.dumps(summary), "Glad it is **better**.")

    store = SessionStore(fake_repo, "k")
    await store.load()
    shared: Dict[str, Any] = {"store": store, "user_text": "bad headache", "model_client": client}
    action = await make_symptom_flow().run_async(shared)

    assert action == "ok"
    assert isinstance(shared["assistant_message"].body, StructuredBody)
    assert shared["persisted"] is True

    # second turn on a freshly loaded store sees the first one as context
    store2 = SessionStore(fake_repo, "k")
    await store2.load()
    shared2: Dict[str, Any] = {"store": store2, "user_text": "it is better now", "model_client": client}
    await make_symptom_flow().run_async(shared2)

    messages = client.calls[1]["messages"]
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "bad headache"}
    assert messages[2]["role"] == "assistant"
    assert json.loads(messages[2]["content"]) == summary
    assert messages[-1] == {"role": "user", "content": "it is better now"}

    records = json.loads(fake_repo.blobs["k"])
    assert [r["role"] for r in records] == ["user", "assistant", "user", "assistant"]
    assert records[1] == {"role": "assistant", "structured": summary}
    assert "<strong>better</strong>" in records[3]["content"]


@pytest.mark.asyncio
async def test_context_is_bounded(fake_repo, make_client):
    fake_repo.blobs["k"] = json.dumps(
        [{"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(20)]
    )
    store = SessionStore(fake_repo, "k")
    await store.load()
    client = make_client("ok")

    await make_symptom_flow(context_limit=8).run_async(
        {"store": store, "user_text": "next", "model_client": client}
    )

    sent = client.calls[0]["messages"]
    assert [m["content"] for m in sent[1:-1]] == [f"m{i}" for i in range(12, 20)]


@pytest.mark.asyncio
async def test_upstream_failure_stores_apology(fake_repo, make_client):
    store = SessionStore(fake_repo, "k")
    shared: Dict[str, Any] = {
        "store": store,
        "user_text": "hello",
        "model_client": make_client(OllamaError("down")),
    }

    await make_symptom_flow().run_async(shared)

    assert shared["upstream_failed"] is True
    body = shared["assistant_message"].body
    assert isinstance(body, FreeformBody) and body.text == APOLOGY_TEXT
    assert json.loads(fake_repo.blobs["k"])[-1] == {"role": "assistant", "content": APOLOGY_TEXT}


@pytest.mark.asyncio
async def test_flow_survives_broken_medium(broken_repo, make_client, summary):
    store = SessionStore(broken_repo, "k")
    await store.load()
    shared: Dict[str, Any] = {
        "store": store,
        "user_text": "fever",
        "model_client": make_client(json.dumps(summary)),
    }

    action = await make_symptom_flow().run_async(shared)

    assert action == "ok"
    assert shared["persisted"] is False
    assert len(store) == 2
