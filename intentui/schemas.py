from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, confloat, field_validator

MAX_AMOUNT = 1_000_000_000.0


class SignalSetsJSON(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reflective: Optional[List[str]] = None
    action: Optional[List[str]] = None
    analytical: Optional[List[str]] = None
    hedging: Optional[List[str]] = None
    urgency: Optional[List[str]] = None

    @field_validator("*")
    @classmethod
    def _no_blank_keywords(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = [w.strip().lower() for w in v]
        if any(not w for w in cleaned):
            raise ValueError("keywords must be non-empty strings")
        return cleaned


class ExpenseJSON(BaseModel):
    amount: confloat(gt=0.0, le=MAX_AMOUNT, allow_inf_nan=False)
    category: str = Field(min_length=1)
    merchant: str = ""
    date: Optional[str] = None
