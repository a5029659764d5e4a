from __future__ import annotations
import re
import threading
import uuid
from dataclasses import asdict, dataclass
from datetime import date as _date
from typing import Any, Dict, FrozenSet, List, Optional

from intentui.core.classifier import normalize
from intentui.core.signals import matches_any
from intentui.schemas import ExpenseJSON

CATEGORIES = ("Food", "Transport", "Shopping", "Bills", "Entertainment", "Health", "Other")


@dataclass(frozen=True)
class Expense:
    id: str
    amount: float
    category: str
    merchant: str
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _today() -> str:
    return _date.today().isoformat()


def _seed() -> List[Expense]:
    today = _today()
    return [
        Expense(id="1", amount=120.0, category="Food", merchant="Whole Foods", date=today),
        Expense(id="2", amount=45.0, category="Transport", merchant="Uber", date=today),
        Expense(id="3", amount=15.5, category="Food", merchant="Starbucks", date=today),
    ]


def _canonical_category(raw: str) -> str:
    for c in CATEGORIES:
        if c.lower() == raw.strip().lower():
            return c
    raise ValueError(f"unknown category {raw!r}; expected one of {list(CATEGORIES)}")


class ExpenseBook:
    def __init__(self, seed: bool = True):
        self._items: List[Expense] = _seed() if seed else []
        self._lock = threading.Lock()

    def add(self, amount: float, category: str, merchant: str = "", date: Optional[str] = None) -> Expense:
        data = ExpenseJSON(amount=amount, category=category, merchant=merchant, date=date)
        e = Expense(
            id=uuid.uuid4().hex[:9],
            amount=float(data.amount),
            category=_canonical_category(data.category),
            merchant=data.merchant.strip(),
            date=data.date or _today(),
        )
        with self._lock:
            self._items.insert(0, e)
        return e

    def entries(self) -> List[Expense]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items = []

    def totals_by_category(self) -> Dict[str, float]:
        out: Dict[str, float] = {}
        for e in self.entries():
            out[e.category] = round(out.get(e.category, 0.0) + e.amount, 2)
        return out

    def summary(self) -> Dict[str, Any]:
        items = self.entries()
        total = sum(e.amount for e in items)
        totals = self.totals_by_category()
        top = max(totals, key=lambda c: totals[c]) if totals else ""
        days = len({e.date for e in items}) or 1
        return {
            "total_spent": round(total, 2),
            "transaction_count": len(items),
            "top_category": top,
            "avg_per_day": round(total / days, 2) if items else 0.0,
        }


CATEGORY_KEYWORDS: Dict[str, FrozenSet[str]] = {
    "Food": frozenset({"food", "groceries", "grocery", "lunch", "dinner", "breakfast", "coffee", "restaurant", "eat", "meal"}),
    "Transport": frozenset({"uber", "taxi", "gas", "fuel", "metro", "bus", "transport", "ride", "lyft", "train"}),
    "Shopping": frozenset({"amazon", "shopping", "clothes", "shoes", "buy", "purchase", "store"}),
    "Bills": frozenset({"rent", "electricity", "wifi", "internet", "insurance", "utility", "bill", "phone"}),
    "Entertainment": frozenset({"movie", "netflix", "games", "concert", "spotify", "entertainment", "fun"}),
    "Health": frozenset({"doctor", "medicine", "gym", "pharmacy", "health", "medical", "hospital"}),
}

_AMOUNT = re.compile(r"[0-9]+(?:\.[0-9]+)?")


@dataclass(frozen=True)
class Prefill:
    amount: Optional[float]
    category: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def extract_prefill(text: str) -> Prefill:
    norm = normalize(text)
    m = _AMOUNT.search(norm)
    category = None
    for cat, words in CATEGORY_KEYWORDS.items():
        if matches_any(norm, words):
            category = cat
            break
    return Prefill(amount=float(m.group(0)) if m else None, category=category)
