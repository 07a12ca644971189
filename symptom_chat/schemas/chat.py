from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional


class SymptomCheckIn(BaseModel):
    message: str
    # prior turns as {role, content}, already bounded by the caller
    history: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class SymptomCheckOut(BaseModel):
    structured: Optional[Dict[str, Any]] = None
    reply: Optional[str] = None
    error: Optional[str] = None


class ChatIn(BaseModel):
    session_id: str
    message: str

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class MessageRecord(BaseModel):
    role: str
    content: Optional[str] = None
    structured: Optional[Dict[str, Any]] = None


class ChatOut(BaseModel):
    message: MessageRecord
    # keyword tags pulled from the user's input
    tags: List[str] = Field(default_factory=list)
    persisted: bool = True
    degraded: bool = False


class ResetOut(BaseModel):
    ok: bool
