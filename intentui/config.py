from __future__ import annotations
from dataclasses import dataclass, field
import json
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from intentui.core.signals import SignalSets, default_signals
from intentui.schemas import SignalSetsJSON


class ConfigError(RuntimeError):
    pass


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _get_threshold(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name}={raw!r} is not a number") from None


@dataclass(frozen=True)
class Config:
    minimal_threshold: float = 0.8
    expanded_threshold: float = 0.75
    hesitation_threshold: int = 5
    signals: SignalSets = field(default_factory=default_signals)
    ledger_path: str = ""
    max_sessions: int = 1000
    session_idle_ttl_s: int = 3600


def load_signals(path: str) -> SignalSets:
    base = default_signals()
    try:
        raw = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read signal sets from {path}: {e}") from e
    try:
        parsed = SignalSetsJSON.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid signal sets in {path}: {e}") from e
    return base.replace(**parsed.model_dump(exclude_none=True))


def validate_config(cfg: Config) -> Config:
    for name in ("minimal_threshold", "expanded_threshold"):
        v = getattr(cfg, name)
        if not (0.0 <= v <= 1.0):
            raise ConfigError(f"{name} must be within [0, 1], got {v}")
    if cfg.expanded_threshold >= cfg.minimal_threshold:
        # rule 2 would swallow every confident action before rule 4 is reached
        raise ConfigError(
            f"expanded_threshold ({cfg.expanded_threshold}) must be below "
            f"minimal_threshold ({cfg.minimal_threshold})"
        )
    if cfg.hesitation_threshold < 0:
        raise ConfigError(f"hesitation_threshold must be >= 0, got {cfg.hesitation_threshold}")
    if cfg.max_sessions < 1:
        raise ConfigError(f"max_sessions must be >= 1, got {cfg.max_sessions}")
    if cfg.session_idle_ttl_s < 1:
        raise ConfigError(f"session_idle_ttl_s must be >= 1, got {cfg.session_idle_ttl_s}")

    sig = cfg.signals
    intent_sets = {"reflective": sig.reflective, "action": sig.action, "analytical": sig.analytical}
    for name, words in intent_sets.items():
        if not words:
            raise ConfigError(f"{name} signal set is empty")
    names = list(intent_sets)
    for i, a in enumerate(names):
        for b in names[i + 1:]:
            shared = intent_sets[a] & intent_sets[b]
            if shared:
                raise ConfigError(f"{a} and {b} signal sets overlap: {sorted(shared)}")
    return cfg


def load_config(signals_path: Optional[str] = None) -> Config:
    signals_path = signals_path or (os.getenv("INTENTUI_SIGNALS_PATH") or "").strip()
    cfg = Config(
        minimal_threshold=_get_threshold("INTENTUI_MINIMAL_THRESHOLD", 0.8),
        expanded_threshold=_get_threshold("INTENTUI_EXPANDED_THRESHOLD", 0.75),
        hesitation_threshold=_get_int("INTENTUI_HESITATION_THRESHOLD", 5),
        signals=load_signals(signals_path) if signals_path else default_signals(),
        ledger_path=(os.getenv("INTENTUI_LEDGER_PATH") or "").strip(),
        max_sessions=_get_int("INTENTUI_MAX_SESSIONS", 1000),
        session_idle_ttl_s=_get_int("INTENTUI_SESSION_IDLE_TTL_S", 3600),
    )
    return validate_config(cfg)
