from __future__ import annotations
from typing import Any, Dict, Optional

from intentui.config import Config
from intentui.core.classifier import classify
from intentui.core.ledger import Ledger
from intentui.core.types import Density, DensitySnapshot, IntentResult, UserConfidenceProfile

INITIAL_REASONING = "initial state"


class DensityTracker:
    def __init__(self, cfg: Optional[Config] = None, ledger: Optional[Ledger] = None, session_id: str = ""):
        self.cfg = cfg or Config()
        self.ledger = ledger
        self.session_id = session_id
        self._profile = UserConfidenceProfile()
        self._density = Density.STANDARD
        self._reasoning = INITIAL_REASONING
        self._override: Optional[Density] = None
        self._last: Optional[IntentResult] = None

    @property
    def density(self) -> Density:
        return self._density

    @property
    def reasoning(self) -> str:
        return self._reasoning

    @property
    def override(self) -> Optional[Density]:
        return self._override

    @property
    def last_result(self) -> Optional[IntentResult]:
        return self._last

    @property
    def profile(self) -> UserConfidenceProfile:
        return self._profile.copy()

    def snapshot(self) -> DensitySnapshot:
        return DensitySnapshot(
            density=self._density,
            reasoning=self._reasoning,
            override=self._override,
            last_result=self._last,
            profile=self._profile.copy(),
        )

    def process_input(self, text: str) -> DensitySnapshot:
        self._profile.interactions += 1
        result = classify(text, self._profile, self.cfg)
        prev = self._last
        changed = prev is not None and result.intent is not prev.intent

        if self._override is not None and changed:
            self._trace("override_decay", cause="intent_changed", override=self._override.value,
                        previous_intent=prev.intent.value, intent=result.intent.value)
            self._override = None

        if self._override is not None:
            self._density = self._override
            self._reasoning = f"manual override active ({self._override.value})"
        else:
            self._density = result.density
            self._reasoning = result.reasoning

        self._last = result
        self._profile.intent_changed = changed
        self._trace("classify", **result.to_dict(), reported=self._density.value)
        return self.snapshot()

    def set_manual_override(self, density: "Density | str") -> DensitySnapshot:
        d = Density.parse(density)
        self._override = d
        self._density = d
        self._reasoning = f"user override ({d.value})"
        self._trace("override_set", override=d.value)
        return self.snapshot()

    def record_success(self) -> DensitySnapshot:
        self._profile.successful_actions += 1
        if self._override is not None:
            self._trace("override_decay", cause="success", override=self._override.value)
            self._override = None
            if self._last is not None:
                self._density = self._last.density
                self._reasoning = self._last.reasoning
            else:
                self._density = Density.STANDARD
                self._reasoning = INITIAL_REASONING
        self._trace("success", successful_actions=self._profile.successful_actions)
        return self.snapshot()

    def record_hesitation(self, count: int = 1) -> DensitySnapshot:
        if count < 0:
            raise ValueError(f"hesitation count must be >= 0, got {count}")
        self._profile.hesitations += count
        self._trace("hesitation", hesitations=self._profile.hesitations)
        return self.snapshot()

    def _trace(self, kind: str, **fields: Any) -> None:
        if self.ledger is None:
            return
        rec: Dict[str, Any] = {"kind": kind, "session": self.session_id}
        rec.update(fields)
        self.ledger.append(rec)
