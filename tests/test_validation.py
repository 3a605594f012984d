import uuid
from datetime import date
from decimal import Decimal

import pytest

from expensetracker.errors import ValidationError
from expensetracker.validation import (
    UNSET,
    parse_category,
    parse_category_patch,
    parse_date,
    parse_expense,
    parse_expense_patch,
    parse_expense_query,
    parse_month,
    parse_period,
    parse_signup,
)


def test_signup_normalizes_email():
    data = parse_signup({"name": "  Asha ", "email": " Asha@Example.COM ", "password": " pass word "})
    assert data.name == "Asha"
    assert data.email == "asha@example.com"
    assert data.password == " pass word "


def test_errors_are_collected_per_field():
    with pytest.raises(ValidationError) as exc:
        parse_signup({"name": "", "email": "x", "password": ""})
    assert [e["field"] for e in exc.value.errors] == ["name", "email", "password"]


def test_amount_is_rounded_to_cents():
    data = parse_expense({"title": "t", "amount": 10.005, "categoryId": str(uuid.uuid4()), "date": "2025-01-01"})
    assert data.amount == Decimal("10.01")


@pytest.mark.parametrize("amount", [0.001, "1e30", "NaN", "Infinity", None, [1]])
def test_amount_rejections(amount):
    with pytest.raises(ValidationError):
        parse_expense({"title": "t", "amount": amount, "categoryId": str(uuid.uuid4()), "date": "2025-01-01"})


def test_category_limit_may_be_zero_or_missing():
    assert parse_category({"name": "Gifts", "monthlyLimit": 0}).monthly_limit == Decimal("0.00")
    assert parse_category({"name": "Gifts"}).monthly_limit is None


def test_patches_distinguish_missing_from_null():
    patch = parse_category_patch({"monthlyLimit": None})
    assert patch.name is UNSET
    assert patch.monthly_limit is None

    patch = parse_expense_patch({"categoryId": None, "notes": None})
    assert patch.category_id is None
    assert patch.notes is None
    assert patch.amount is UNSET


@pytest.mark.parametrize(
    "raw, expected",
    [("2025-04-13", date(2025, 4, 13)), ("2025-04-13T23:59:00Z", date(2025, 4, 13)), ("13/04/2025", None), ("", None)],
)
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected


def test_query_defaults_and_sort_fallback():
    query = parse_expense_query({})
    assert (query.page, query.limit, query.sort_by, query.sort_order) == (1, 20, "date", "desc")
    query = parse_expense_query({"sortBy": "amount", "sortOrder": "sideways"})
    assert (query.sort_by, query.sort_order) == ("date", "desc")
    query = parse_expense_query({"sortBy": "createdAt", "sortOrder": "asc", "page": "3", "limit": "5"})
    assert (query.sort_by, query.sort_order, query.page, query.limit) == ("createdAt", "asc", 3, 5)


def test_query_page_is_bounded():
    assert parse_expense_query({"page": "1000000"}).page == 1_000_000
    with pytest.raises(ValidationError) as exc:
        parse_expense_query({"page": "99999999999999999999"})
    assert exc.value.errors[0]["field"] == "page"


def test_parse_month_bounds():
    window = parse_month("2024-02")
    assert (window.start, window.end) == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(ValidationError):
        parse_month("0000-01")
    with pytest.raises(ValidationError):
        parse_month("2024-02\n")


def test_parse_period():
    assert parse_period("week") == "week"
    assert parse_period("year") == "year"
    assert parse_period(None) == "month"
