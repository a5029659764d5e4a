from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from intentui.config import Config
from intentui.core.signals import SignalSets, has_digits, matches_any
from intentui.core.types import Density, IntentCategory, IntentResult, UrgencyLevel, UserConfidenceProfile

HEDGING_PENALTY = 0.4
REFLECTIVE_PENALTY = 0.2
HESITATION_PENALTY = 0.1
INTENT_CHANGED_PENALTY = 0.1
DIGIT_BONUS = 0.1


@dataclass(frozen=True)
class Rule:
    name: str
    when: Callable[[IntentCategory, float, UrgencyLevel, Config], bool]
    density: Density
    label: str


# Evaluated top to bottom; the first rule whose predicate holds decides.
RULES: Tuple[Rule, ...] = (
    Rule("reflective", lambda i, c, u, cfg: i is IntentCategory.REFLECTIVE, Density.EXPANDED, "seeking guidance"),
    Rule("low_confidence", lambda i, c, u, cfg: c < cfg.expanded_threshold, Density.EXPANDED, "confidence below threshold"),
    Rule("urgent", lambda i, c, u, cfg: u is UrgencyLevel.HIGH, Density.MINIMAL, "prioritizing speed"),
    Rule(
        "confident_action",
        lambda i, c, u, cfg: i is IntentCategory.ACTION and c >= cfg.minimal_threshold,
        Density.MINIMAL,
        "high confidence action",
    ),
    Rule("default", lambda i, c, u, cfg: True, Density.STANDARD, "default balanced state"),
)


def normalize(text) -> str:
    if text is None:
        return ""
    return " ".join(str(text).lower().split())


def detect_intent(text: str, signals: SignalSets) -> IntentCategory:
    # reflective language wins even when an action verb is also present
    if matches_any(text, signals.reflective):
        return IntentCategory.REFLECTIVE
    if matches_any(text, signals.action):
        return IntentCategory.ACTION
    if matches_any(text, signals.analytical):
        return IntentCategory.ANALYTICAL
    return IntentCategory.ACTION


def detect_urgency(text: str, signals: SignalSets) -> UrgencyLevel:
    if "!" in text or matches_any(text, signals.urgency):
        return UrgencyLevel.HIGH
    return UrgencyLevel.NORMAL


def compute_confidence(text: str, profile: UserConfidenceProfile, cfg: Config) -> float:
    score = 1.0
    if matches_any(text, cfg.signals.hedging):
        score -= HEDGING_PENALTY
    if matches_any(text, cfg.signals.reflective):
        score -= REFLECTIVE_PENALTY
    if profile.hesitations > cfg.hesitation_threshold:
        score -= HESITATION_PENALTY
    if profile.intent_changed:
        score -= INTENT_CHANGED_PENALTY
    if has_digits(text):
        score += DIGIT_BONUS
    return round(min(max(score, 0.0), 1.0), 4)


def resolve_density(
    intent: IntentCategory, confidence: float, urgency: UrgencyLevel, cfg: Config
) -> Tuple[Rule, int]:
    for n, rule in enumerate(RULES, start=1):
        if rule.when(intent, confidence, urgency, cfg):
            return rule, n
    raise AssertionError("default rule must always match")


def explain(rule: Rule, n: int, intent: IntentCategory, confidence: float, urgency: UrgencyLevel, cfg: Config) -> str:
    return (
        f"{rule.label} [rule={n}:{rule.name} intent={intent.value} confidence={confidence:.2f} "
        f"urgency={urgency.value} expanded<{cfg.expanded_threshold:.2f} minimal>={cfg.minimal_threshold:.2f}]"
    )


def classify(text, profile: Optional[UserConfidenceProfile] = None, cfg: Optional[Config] = None) -> IntentResult:
    cfg = cfg or Config()
    profile = profile or UserConfidenceProfile()
    norm = normalize(text)

    intent = detect_intent(norm, cfg.signals)
    urgency = detect_urgency(norm, cfg.signals)
    confidence = compute_confidence(norm, profile, cfg)
    rule, n = resolve_density(intent, confidence, urgency, cfg)

    return IntentResult(
        intent=intent,
        confidence=confidence,
        urgency=urgency,
        density=rule.density,
        rule=rule.name,
        reasoning=explain(rule, n, intent, confidence, urgency, cfg),
        text="" if text is None else str(text),
    )
