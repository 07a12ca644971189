# symptom_chat/services/tags.py
from __future__ import annotations

import re
from typing import List

_SPLIT_RE = re.compile(r"[^a-zA-Z]+")
_STOPWORDS = frozenset({
    "and", "but", "the", "for", "with", "have", "had", "been", "very", "mild",
    "severe", "pain", "feel", "feels", "felt", "since", "that", "this", "there",
    "also", "little", "some",
})


def extract_symptom_tags(text: str, limit: int = 6) -> List[str]:
    """Naive keyword tags for a symptom description.

    The first `limit` candidate words are taken before de-duplication, so a
    repeated word can leave fewer than `limit` tags.
    """
    words = [
        w for w in _SPLIT_RE.split((text or "").lower())
        if len(w) > 2 and w not in _STOPWORDS
    ]
    return list(dict.fromkeys(words[:limit]))
