# symptom_chat/schemas/message.py
from __future__ import annotations

import math
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["system", "user", "assistant"]
Risk = Literal["low", "medium", "high"]

_RISKS = ("low", "medium", "high")


def clamp_severity(value: Any) -> int:
    """Severity as shown to people: an int in [0, 100]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if math.isnan(value):
        return 0
    return int(round(min(100, max(0, value))))


class Possibility(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    description: str = ""
    risk: Risk = "medium"

    @field_validator("title", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("risk", mode="before")
    @classmethod
    def coerce_risk(cls, v: Any) -> str:
        s = str(v or "").strip().lower()
        return s if s in _RISKS else "medium"


class StructuredResponse(BaseModel):
    """Clinical-style summary produced by the model.

    Field names follow the JSON wire shape (camelCase) through aliases.
    `severity` is kept exactly as emitted; read it via `display_severity`.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    possibilities: List[Possibility]
    next_steps: List[str] = Field(alias="nextSteps")
    clarifying_questions: List[str] = Field(alias="clarifyingQuestions")
    severity: Union[int, float]
    chips: List[str] = Field(default_factory=list)

    @field_validator("possibilities", mode="before")
    @classmethod
    def drop_non_objects(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [p for p in v if isinstance(p, dict)]
        return v

    @field_validator("next_steps", "clarifying_questions", "chips", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [x if isinstance(x, str) else str(x) for x in v]
        return v

    @field_validator("severity")
    @classmethod
    def finite_severity(cls, v: Union[int, float]) -> Union[int, float]:
        # NaN / Infinity have no JSON encoding
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("severity must be a finite number")
        return v

    @property
    def display_severity(self) -> int:
        return clamp_severity(self.severity)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class FreeformBody(BaseModel):
    kind: Literal["freeform"] = "freeform"
    text: str


class StructuredBody(BaseModel):
    kind: Literal["structured"] = "structured"
    data: StructuredResponse


Body = Annotated[Union[FreeformBody, StructuredBody], Field(discriminator="kind")]


class Message(BaseModel):
    """One conversational turn; exactly one body variant is populated."""

    role: Role
    body: Body

    @classmethod
    def freeform(cls, role: str, text: str) -> "Message":
        return cls(role=role, body=FreeformBody(text=text))

    @classmethod
    def structured(cls, role: str, data: StructuredResponse) -> "Message":
        return cls(role=role, body=StructuredBody(data=data))

    @property
    def is_structured(self) -> bool:
        return isinstance(self.body, StructuredBody)

    def to_record(self) -> Dict[str, Any]:
        """Compact persisted form: {role, structured} or {role, content}."""
        if isinstance(self.body, StructuredBody):
            return {"role": self.role, "structured": self.body.data.to_wire()}
        return {"role": self.role, "content": self.body.text}


class ContextTurn(BaseModel):
    role: Role
    text: str

    def to_request(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.text}
