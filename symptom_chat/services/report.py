# symptom_chat/services/report.py
from __future__ import annotations

from typing import List, Optional

from symptom_chat.schemas.message import Message, StructuredBody, StructuredResponse
from symptom_chat.services.markup import render_markup

TITLE = "Symptom Checker Report"
FOOTER = "Not a diagnosis. Educational only. Please consult a clinician."


def _structured_markdown(s: StructuredResponse) -> str:
    lines: List[str] = [
        f"# {TITLE}",
        "",
        "Generated summary based on your described symptoms.",
        "",
        f"**Severity:** {s.display_severity}/100",
        "",
        "## Diagnosis possibilities",
        "",
    ]
    lines += [f"- **{p.title}** ({p.risk}) — {p.description}" for p in s.possibilities]
    lines += ["", "## Next steps", ""]
    lines += [f"{i}. {step}" for i, step in enumerate(s.next_steps, 1)]
    if s.clarifying_questions:
        lines += ["", "## Clarifying questions", ""]
        lines += [f"- {q}" for q in s.clarifying_questions]
    lines += ["", "---", "", FOOTER]
    return "\n".join(lines)


def build_report(message: Optional[Message]) -> str:
    """HTML report for the latest assistant message."""
    if message is None:
        return render_markup(f"# {TITLE}\n\nNo assistant response available.")
    if isinstance(message.body, StructuredBody):
        return render_markup(_structured_markdown(message.body.data))
    # freeform assistant text is already rendered markup
    return f'<div class="report">{message.body.text}</div>'
