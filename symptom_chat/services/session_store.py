# symptom_chat/services/session_store.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from symptom_chat.errors import PersistenceError
from symptom_chat.schemas.message import Message
from symptom_chat.services.normalizer import decode_structured, parse_json_text

logger = logging.getLogger(__name__)

# system prompts are added per request and never stored
_STORED_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class PersistResult:
    ok: bool
    error: Optional[str] = None


# ---------------------------
# Reconciliation of stored records
# ---------------------------

def _structured_record(entry: dict) -> Optional[Message]:
    """{role, structured: {...}} written by the current format."""
    data = decode_structured(entry.get("structured"))
    if data is None:
        return None
    return Message.structured(entry["role"], data)


def _legacy_serialized_record(entry: dict) -> Optional[Message]:
    """{role, content: "<summary JSON>"} from before structured records existed."""
    content = entry.get("content")
    if not isinstance(content, str):
        return None
    data = decode_structured(parse_json_text(content))
    if data is None:
        return None
    return Message.structured(entry["role"], data)


def _content_record(entry: dict) -> Optional[Message]:
    content = entry.get("content")
    if not isinstance(content, str):
        return None
    return Message.freeform(entry["role"], content)


_RECORD_CASES: Sequence[Callable[[dict], Optional[Message]]] = (
    _structured_record,
    _legacy_serialized_record,
    _content_record,
)


def reconcile_entry(entry: Any) -> Optional[Message]:
    """Map one stored record onto the canonical Message, or None to skip it."""
    if not isinstance(entry, dict) or entry.get("role") not in _STORED_ROLES:
        return None
    for case in _RECORD_CASES:
        msg = case(entry)
        if msg is not None:
            return msg
    return None


def decode_records(raw: Optional[str]) -> List[Message]:
    """Parse a persisted blob; absent or malformed content means an empty session."""
    if raw is None:
        return []
    try:
        entries = json.loads(raw)
    except ValueError:
        logger.warning("ignoring malformed session blob (%d chars)", len(raw))
        return []
    if not isinstance(entries, list):
        logger.warning("ignoring session blob of type %s", type(entries).__name__)
        return []

    messages: List[Message] = []
    for entry in entries:
        msg = reconcile_entry(entry)
        if msg is None:
            logger.debug("skipping unrecognized session record: %r", entry)
            continue
        messages.append(msg)
    return messages


def encode_records(messages: Sequence[Message]) -> str:
    return json.dumps([m.to_record() for m in messages], ensure_ascii=False, allow_nan=False)


# ---------------------------
# Store
# ---------------------------

class SessionStore:
    """
    Owns one ordered chat session and its persisted mirror.

    The medium is anything exposing `get_session_blob`, `put_session_blob`
    and `delete_session_blob` (see Repo). Medium failures never propagate:
    they are logged and reported through PersistResult, and the in-memory
    session stays authoritative.
    """

    def __init__(self, medium: Any, key: str) -> None:
        self._medium = medium
        self.key = key
        self._messages: List[Message] = []

    @property
    def messages(self) -> List[Message]:
        """Snapshot of the session, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def last_assistant(self) -> Optional[Message]:
        for m in reversed(self._messages):
            if m.role == "assistant":
                return m
        return None

    def records(self) -> List[dict]:
        return [m.to_record() for m in self._messages]

    async def load(self) -> List[Message]:
        try:
            raw = await self._medium.get_session_blob(self.key)
        except PersistenceError as e:
            logger.warning("session %s unreadable, starting empty: %s", self.key, e, extra={"session": self.key})
            raw = None
        self._messages = decode_records(raw)
        return self.messages

    async def append(self, message: Message) -> PersistResult:
        self._messages.append(message)
        return await self.persist()

    async def reset(self) -> PersistResult:
        self._messages = []
        try:
            await self._medium.delete_session_blob(self.key)
        except PersistenceError as e:
            logger.warning("could not delete session %s: %s", self.key, e, extra={"session": self.key})
            return PersistResult(ok=False, error=str(e))
        return PersistResult(ok=True)

    async def persist(self) -> PersistResult:
        payload = encode_records(self._messages)
        try:
            await self._medium.put_session_blob(self.key, payload)
        except PersistenceError as e:
            logger.warning("could not persist session %s: %s", self.key, e, extra={"session": self.key})
            return PersistResult(ok=False, error=str(e))
        return PersistResult(ok=True)
