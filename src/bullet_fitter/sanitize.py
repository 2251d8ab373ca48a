from __future__ import annotations

import re
from typing import List, Mapping

from .wordlists import DEFAULT_BANNED_WORDS

_PERIOD_RUN_RE = re.compile(r"\.{2,}\s*")
# Dotted initialisms such as "U.S." or "e.g." do not end a sentence.
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])(?<![A-Za-z]\.[A-Za-z]\.)\s+")
_TRUNCATED_TAIL_RE = re.compile(r"[a-z]{2,}$")
_MULTI_SPACE_RE = re.compile(r"\s{2,}")
_TERMINAL_PUNCTUATION = (".", "!", "?")


def replace_banned_words(text: str, banned_words: Mapping[str, str]) -> str:
    """Swap banned words for their replacement, keeping a leading capital."""

    def _substitute(replacement: str):
        def _apply(match: re.Match[str]) -> str:
            if match.group(0)[0].isupper():
                return replacement[:1].upper() + replacement[1:]
            return replacement

        return _apply

    for banned, replacement in banned_words.items():
        pattern = re.compile(rf"\b{re.escape(banned)}\b", re.IGNORECASE)
        text = pattern.sub(_substitute(replacement), text)
    return text


def sanitize_statement_text(
    statement: str, banned_words: Mapping[str, str] | None = None
) -> str:
    """
    Clean up artifacts an LLM revision tends to leave behind.

    Banned words are replaced, runs of periods collapse into one, a trailing
    sentence that was cut off mid-thought is dropped, whitespace runs shrink
    to single spaces and the result always ends in terminal punctuation.
    """
    cleaned = replace_banned_words(
        statement, DEFAULT_BANNED_WORDS if banned_words is None else banned_words
    )
    cleaned = _PERIOD_RUN_RE.sub(". ", cleaned)

    complete: List[str] = []
    for sentence in _SENTENCE_SPLIT_RE.split(cleaned):
        trimmed = sentence.strip()
        if not trimmed:
            continue
        if trimmed.endswith(_TERMINAL_PUNCTUATION):
            complete.append(trimmed)
            continue
        truncated = trimmed.endswith(",") or _TRUNCATED_TAIL_RE.search(trimmed)
        if truncated and complete:
            last_period = trimmed.rfind(".")
            if last_period > len(trimmed) * 0.5:
                complete.append(trimmed[: last_period + 1])
            break
        complete.append(trimmed.rstrip(",") + ".")

    cleaned = _MULTI_SPACE_RE.sub(" ", " ".join(complete)).strip()
    if cleaned and not cleaned.endswith(_TERMINAL_PUNCTUATION):
        cleaned += "."
    return cleaned
