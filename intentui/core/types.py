from __future__ import annotations
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Density(str, Enum):
    MINIMAL = "MINIMAL"
    STANDARD = "STANDARD"
    EXPANDED = "EXPANDED"

    @classmethod
    def parse(cls, value: "Density | str") -> "Density":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"unknown density {value!r}; expected one of {[d.value for d in cls]}") from None


class IntentCategory(str, Enum):
    ACTION = "ACTION"
    ANALYTICAL = "ANALYTICAL"
    REFLECTIVE = "REFLECTIVE"


class UrgencyLevel(str, Enum):
    NORMAL = "NORMAL"
    HIGH = "HIGH"


@dataclass
class UserConfidenceProfile:
    interactions: int = 0
    successful_actions: int = 0
    hesitations: int = 0
    intent_changed: bool = False

    def copy(self) -> "UserConfidenceProfile":
        return UserConfidenceProfile(**asdict(self))


@dataclass(frozen=True)
class IntentResult:
    intent: IntentCategory
    confidence: float
    urgency: UrgencyLevel
    density: Density
    rule: str
    reasoning: str
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.intent.value,
            "confidence": self.confidence,
            "urgency": self.urgency.value,
            "density": self.density.value,
            "rule": self.rule,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class DensitySnapshot:
    density: Density
    reasoning: str
    override: Optional[Density]
    last_result: Optional[IntentResult]
    profile: UserConfidenceProfile

    @property
    def override_active(self) -> bool:
        return self.override is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "density": self.density.value,
            "reasoning": self.reasoning,
            "override_active": self.override_active,
            "override": self.override.value if self.override else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "profile": asdict(self.profile),
        }
