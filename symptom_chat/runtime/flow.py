# symptom_chat/runtime/flow.py
from __future__ import annotations

from pocketflow import AsyncFlow

from symptom_chat.runtime.nodes.context import ContextNode
from symptom_chat.runtime.nodes.model_chat import ModelChatNode
from symptom_chat.runtime.nodes.normalize import NormalizeNode
from symptom_chat.runtime.nodes.persist import PersistNode
from symptom_chat.services.context import DEFAULT_CONTEXT_LIMIT


def make_symptom_flow(*, context_limit: int = DEFAULT_CONTEXT_LIMIT) -> AsyncFlow:
    """Symptom chat turn:
    context → model_chat → normalize → persist

    shared in:  store (loaded SessionStore), user_text, model_client
    shared out: context, raw_reply, upstream_failed, assistant_message, persisted
    """

    context = ContextNode(limit=context_limit)
    model_chat = ModelChatNode()
    normalize = NormalizeNode()
    persist = PersistNode()

    context.successors = {"ok": model_chat}
    model_chat.successors = {"ok": normalize}
    normalize.successors = {"ok": persist}

    return AsyncFlow(start=context)
