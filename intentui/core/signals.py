from __future__ import annotations
import re
from dataclasses import dataclass, fields, replace as _dc_replace
from typing import FrozenSet, Iterable


def _words(items: Iterable[str]) -> FrozenSet[str]:
    return frozenset(w.strip().lower() for w in items if w and w.strip())


@dataclass(frozen=True)
class SignalSets:
    reflective: FrozenSet[str]
    action: FrozenSet[str]
    analytical: FrozenSet[str]
    hedging: FrozenSet[str]
    urgency: FrozenSet[str]

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _words(getattr(self, f.name)))

    def replace(self, **sets: Iterable[str]) -> "SignalSets":
        return _dc_replace(self, **{k: _words(v) for k, v in sets.items()})


def default_signals() -> SignalSets:
    return SignalSets(
        reflective={
            "why", "help", "understand", "insight", "tips", "suggest",
            "how to", "how do i", "what should", "broke", "struggling",
            "advice", "improve",
        },
        action={
            "add", "create", "save", "delete", "remove", "export", "share",
            "log", "record", "spent", "paid", "bought",
        },
        analytical={
            "show", "display", "list", "compare", "analyze", "breakdown",
            "chart", "graph", "visualize", "trend", "history", "recent",
        },
        hedging={
            "think", "maybe", "probably", "not sure", "guess", "forgot",
            "unsure", "might", "don't remember",
        },
        urgency={"now", "asap", "immediately", "urgent", "emergency", "fast", "quick"},
    )


_PATTERN_CACHE: dict = {}


def _pattern(words: FrozenSet[str]) -> "re.Pattern[str]":
    pat = _PATTERN_CACHE.get(words)
    if pat is None:
        # longest first so "how do i" wins over a shorter overlapping entry
        alts = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
        pat = re.compile(r"(?<![\w])(?:" + alts + r")(?![\w])")
        _PATTERN_CACHE[words] = pat
    return pat


def matches_any(text: str, words: FrozenSet[str]) -> bool:
    if not words or not text:
        return False
    return _pattern(words).search(text) is not None


_DIGIT = re.compile(r"[0-9]")


def has_digits(text: str) -> bool:
    return _DIGIT.search(text) is not None
