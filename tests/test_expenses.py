import pytest

from intentui.expenses import ExpenseBook, Prefill, extract_prefill


def test_seeded_book():
    book = ExpenseBook()
    items = book.entries()
    assert len(items) == 3
    assert book.totals_by_category() == {"Food": 135.5, "Transport": 45.0}


def test_add_prepends_and_normalizes_category():
    book = ExpenseBook(seed=False)
    e = book.add(12.5, "food", merchant=" Cafe ", date="2024-05-01")
    assert e.category == "Food"
    assert e.merchant == "Cafe"
    assert e.date == "2024-05-01"
    book.add(3, "Transport")
    assert [x.category for x in book.entries()] == ["Transport", "Food"]


@pytest.mark.parametrize("amount,category", [(0, "Food"), (-5, "Food"), (10, "Rockets"), (10, "")])
def test_add_rejects_bad_input(amount, category):
    book = ExpenseBook(seed=False)
    with pytest.raises(ValueError):
        book.add(amount, category)
    assert book.entries() == []


def test_clear():
    book = ExpenseBook()
    book.clear()
    assert book.entries() == []
    assert book.totals_by_category() == {}


@pytest.mark.parametrize("amount", [float("inf"), float("nan"), 1e308])
def test_add_rejects_non_finite_or_huge(amount):
    book = ExpenseBook()
    with pytest.raises(ValueError):
        book.add(amount, "Food")
    assert len(book.entries()) == 3
    assert book.summary()["transaction_count"] == 3


def test_summary_seeded():
    assert ExpenseBook().summary() == {
        "total_spent": 180.5,
        "transaction_count": 3,
        "top_category": "Food",
        "avg_per_day": 180.5,
    }


def test_summary_empty():
    assert ExpenseBook(seed=False).summary() == {
        "total_spent": 0.0,
        "transaction_count": 0,
        "top_category": "",
        "avg_per_day": 0.0,
    }


def test_summary_averages_over_distinct_days():
    book = ExpenseBook(seed=False)
    book.add(10, "Food", date="2024-05-01")
    book.add(20, "Food", date="2024-05-01")
    book.add(30, "Health", date="2024-05-02")
    s = book.summary()
    assert s["total_spent"] == 60.0
    assert s["avg_per_day"] == 30.0
    assert s["top_category"] == "Health"


@pytest.mark.parametrize("text,amount,category", [
    ("Add 300 for uber", 300.0, "Transport"),
    ("coffee 4.50", 4.5, "Food"),
    ("paid the RENT", None, "Bills"),
    ("hello", None, None),
    ("", None, None),
    ("bused 20", 20.0, None),
])
def test_extract_prefill(text, amount, category):
    assert extract_prefill(text) == Prefill(amount=amount, category=category)
