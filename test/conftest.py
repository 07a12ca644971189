# test/conftest.py
import json
from typing import Any, Dict, List, Optional

import pytest

from symptom_chat.errors import PersistenceError


SUMMARY: Dict[str, Any] = {
    "possibilities": [
        {"title": "Tension headache", "description": "Muscle tightness", "risk": "low"},
        {"title": "Migraine", "description": "Recurrent throbbing pain", "risk": "medium"},
        {"title": "Meningitis", "description": "Rare; fever and stiff neck", "risk": "high"},
    ],
    "nextSteps": ["Hydrate", "Rest in a dark room", "See a clinician if it worsens"],
    "clarifyingQuestions": ["How long has it lasted?"],
    "severity": 40,
    "chips": ["Fever", "Nausea"],
}


class FakeRepo:
    """In-memory stand-in for Repo's session blob methods."""

    def __init__(self, blobs: Optional[Dict[str, str]] = None) -> None:
        self.blobs: Dict[str, str] = dict(blobs or {})
        self.writes: List[str] = []

    async def get_session_blob(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    async def put_session_blob(self, key: str, value: str) -> None:
        self.blobs[key] = value
        self.writes.append(key)

    async def delete_session_blob(self, key: str) -> None:
        self.blobs.pop(key, None)


class BrokenRepo:
    """Medium that is always unavailable."""

    async def get_session_blob(self, key: str) -> Optional[str]:
        raise PersistenceError("medium unavailable")

    async def put_session_blob(self, key: str, value: str) -> None:
        raise PersistenceError("quota exceeded")

    async def delete_session_blob(self, key: str) -> None:
        raise PersistenceError("medium unavailable")


class FakeModelClient:
    """Returns queued replies in order and records each call."""

    def __init__(self, *replies: Any) -> None:
        self._replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    async def chat(self, messages, **kwargs) -> str:
        self.calls.append({"messages": messages, **kwargs})
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def summary() -> Dict[str, Any]:
    return json.loads(json.dumps(SUMMARY))


@pytest.fixture()
def fake_repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture()
def broken_repo() -> BrokenRepo:
    return BrokenRepo()


@pytest.fixture()
def make_client():
    return FakeModelClient
