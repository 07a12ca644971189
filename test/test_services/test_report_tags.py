# tests/test_services/test_report_tags.py
from symptom_chat.schemas.message import Message, StructuredResponse
from symptom_chat.services.report import FOOTER, build_report
from symptom_chat.services.tags import extract_symptom_tags


def test_report_for_structured_message_uses_clamped_severity(summary):
    summary["severity"] = 300
    msg = Message.structured("assistant", StructuredResponse.model_validate(summary))

    html = build_report(msg)

    assert "100/100" in html
    assert "300" not in html
    assert "<strong>Migraine</strong> (medium)" in html
    assert "<ol>" in html and "Rest in a dark room" in html
    assert "Clarifying questions" in html
    assert FOOTER in html


def test_report_omits_empty_clarifying_questions(summary):
    summary["clarifyingQuestions"] = []
    html = build_report(Message.structured("assistant", StructuredResponse.model_validate(summary)))
    assert "Clarifying questions" not in html


def test_report_for_freeform_and_missing_message():
    assert "<p>Rest.</p>" in build_report(Message.freeform("assistant", "<p>Rest.</p>"))
    assert "No assistant response available." in build_report(None)


def test_symptom_tags_skip_stopwords_and_short_words():
    tags = extract_symptom_tags("I have a severe headache and fever since Monday")
    assert tags == ["headache", "fever", "monday"]


def test_symptom_tags_take_limit_before_dedup():
    text = "cough cough cough cough cough cough wheeze"
    assert extract_symptom_tags(text) == ["cough"]
    assert extract_symptom_tags("nausea dizziness fatigue", limit=2) == ["nausea", "dizziness"]
