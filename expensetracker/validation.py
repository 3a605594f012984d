"""Typed request inputs and the functions that build them from raw JSON / query data.

Every ``parse_*`` function either returns a fully validated input object or raises
:class:`~expensetracker.errors.ValidationError` listing the offending fields.
"""
import calendar
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .errors import ValidationError
from .models import DEFAULT_COLOR

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")

SORT_FIELDS = ("date", "amount", "title", "createdAt")
SORT_ORDERS = ("asc", "desc")
PERIODS = ("week", "month", "year")
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000


class _Unset:
    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class SignupInput:
    name: str
    email: str
    password: str


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


@dataclass(frozen=True)
class CategoryInput:
    name: str
    monthly_limit: Optional[Decimal]
    color: str


@dataclass(frozen=True)
class CategoryPatch:
    name: object = UNSET
    monthly_limit: object = UNSET
    color: object = UNSET


@dataclass(frozen=True)
class ExpenseInput:
    title: str
    amount: Decimal
    category_id: uuid.UUID
    expense_date: date
    notes: Optional[str] = None


@dataclass(frozen=True)
class ExpensePatch:
    title: object = UNSET
    amount: object = UNSET
    category_id: object = UNSET
    expense_date: object = UNSET
    notes: object = UNSET


@dataclass(frozen=True)
class ExpenseQuery:
    category_id: Optional[uuid.UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "date"
    sort_order: str = "desc"


@dataclass(frozen=True)
class MonthWindow:
    month: str
    start: date
    end: date


class _Errors:
    def __init__(self):
        self.items = []

    def add(self, field, message):
        self.items.append({"field": field, "message": message})

    def raise_if_any(self):
        if self.items:
            raise ValidationError("Invalid request data", errors=self.items)


def _require_object(data):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _text(value, field, errors, min_len=1, max_len=None, strip=True):
    if not isinstance(value, str):
        errors.add(field, "Must be a string")
        return None
    if strip:
        value = value.strip()
    if len(value) < min_len:
        errors.add(field, f"Must be at least {min_len} characters")
        return None
    if max_len is not None and len(value) > max_len:
        errors.add(field, f"Must be at most {max_len} characters")
        return None
    return value


def _email(value, errors):
    value = _text(value, "email", errors, max_len=255)
    if value is None:
        return None
    if not EMAIL_RE.match(value):
        errors.add("email", "Invalid email address")
        return None
    return value.lower()


def _decimal(value, field, errors, allow_zero):
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        errors.add(field, "Must be a number")
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        errors.add(field, "Must be a number")
        return None
    if not number.is_finite():
        errors.add(field, "Must be a number")
        return None
    if number > MAX_AMOUNT:
        errors.add(field, f"Must not exceed {MAX_AMOUNT}")
        return None
    if number >= 0:
        number = number.quantize(CENT, rounding=ROUND_HALF_UP)
    if number < 0 or (number == 0 and not allow_zero):
        errors.add(field, "Must not be negative" if allow_zero else "Must be greater than zero")
        return None
    return number


def _uuid(value, field, errors):
    if not isinstance(value, str):
        errors.add(field, "Must be a valid id")
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        errors.add(field, "Must be a valid id")
        return None


def parse_date(value) -> Optional[date]:
    """Parse an ISO date or datetime string; return ``None`` when it cannot be parsed."""
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _date(value, field, errors):
    parsed = parse_date(value)
    if parsed is None:
        errors.add(field, "Invalid date format")
    return parsed


def _color(value, errors):
    if not isinstance(value, str) or not COLOR_RE.match(value.strip()):
        errors.add("color", "Must be a hex color like #6366F1")
        return None
    return value.strip().upper()


def _limit(value, errors):
    if value is None:
        return None
    return _decimal(value, "monthlyLimit", errors, allow_zero=True)


def parse_signup(data) -> SignupInput:
    data = _require_object(data)
    errors = _Errors()
    name = _text(data.get("name"), "name", errors, min_len=2, max_len=50)
    email = _email(data.get("email"), errors)
    password = _text(data.get("password"), "password", errors, min_len=6, max_len=100, strip=False)
    errors.raise_if_any()
    return SignupInput(name=name, email=email, password=password)


def parse_login(data) -> LoginInput:
    data = _require_object(data)
    errors = _Errors()
    email = _email(data.get("email"), errors)
    password = _text(data.get("password"), "password", errors, min_len=6, max_len=100, strip=False)
    errors.raise_if_any()
    return LoginInput(email=email, password=password)


def parse_category(data) -> CategoryInput:
    data = _require_object(data)
    errors = _Errors()
    name = _text(data.get("name"), "name", errors, max_len=50)
    limit = _limit(data.get("monthlyLimit"), errors)
    color = DEFAULT_COLOR
    if data.get("color") is not None:
        color = _color(data["color"], errors)
    errors.raise_if_any()
    return CategoryInput(name=name, monthly_limit=limit, color=color)


def parse_category_patch(data) -> CategoryPatch:
    data = _require_object(data)
    errors = _Errors()
    fields = {}
    if "name" in data:
        fields["name"] = _text(data["name"], "name", errors, max_len=50)
    if "monthlyLimit" in data:
        fields["monthly_limit"] = _limit(data["monthlyLimit"], errors)
    if "color" in data:
        fields["color"] = _color(data["color"], errors)
    errors.raise_if_any()
    return CategoryPatch(**fields)


def parse_expense(data) -> ExpenseInput:
    data = _require_object(data)
    errors = _Errors()
    title = _text(data.get("title"), "title", errors, max_len=100)
    amount = _decimal(data.get("amount"), "amount", errors, allow_zero=False)
    category_id = _uuid(data.get("categoryId"), "categoryId", errors)
    expense_date = _date(data.get("date"), "date", errors)
    notes = None
    if data.get("notes") is not None:
        notes = _text(data["notes"], "notes", errors, min_len=0, max_len=500)
    errors.raise_if_any()
    return ExpenseInput(
        title=title, amount=amount, category_id=category_id, expense_date=expense_date, notes=notes
    )


def parse_expense_patch(data) -> ExpensePatch:
    data = _require_object(data)
    errors = _Errors()
    fields = {}
    if "title" in data:
        fields["title"] = _text(data["title"], "title", errors, max_len=100)
    if "amount" in data:
        fields["amount"] = _decimal(data["amount"], "amount", errors, allow_zero=False)
    if "categoryId" in data:
        raw = data["categoryId"]
        fields["category_id"] = None if raw is None else _uuid(raw, "categoryId", errors)
    if "date" in data:
        fields["expense_date"] = _date(data["date"], "date", errors)
    if "notes" in data:
        raw = data["notes"]
        fields["notes"] = None if raw is None else _text(raw, "notes", errors, min_len=0, max_len=500)
    errors.raise_if_any()
    return ExpensePatch(**fields)


def _positive_int(value, field, errors, default, maximum=None):
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        errors.add(field, "Must be a positive integer")
        return default
    if number < 1:
        errors.add(field, "Must be a positive integer")
        return default
    if maximum is not None and number > maximum:
        errors.add(field, f"Must be at most {maximum}")
        return default
    return number


def parse_expense_query(args) -> ExpenseQuery:
    errors = _Errors()
    category_id = None
    if args.get("categoryId"):
        category_id = _uuid(args["categoryId"], "categoryId", errors)
    start_date = _date(args["startDate"], "startDate", errors) if args.get("startDate") else None
    end_date = _date(args["endDate"], "endDate", errors) if args.get("endDate") else None
    page = _positive_int(args.get("page"), "page", errors, 1, MAX_PAGE)
    limit = _positive_int(args.get("limit"), "limit", errors, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
    errors.raise_if_any()

    sort_by = args.get("sortBy", "date")
    sort_order = args.get("sortOrder", "desc")
    # unknown sort options fall back to newest first
    if sort_by not in SORT_FIELDS or sort_order not in SORT_ORDERS:
        sort_by, sort_order = "date", "desc"
    return ExpenseQuery(
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def parse_month(value) -> MonthWindow:
    match = MONTH_RE.fullmatch(value or "")
    if not match or int(match.group(1)) < 1 or not 1 <= int(match.group(2)) <= 12:
        raise ValidationError("Month parameter required in format YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    last_day = calendar.monthrange(year, month)[1]
    return MonthWindow(month=value, start=date(year, month, 1), end=date(year, month, last_day))


def parse_period(value) -> str:
    return value if value in PERIODS else "month"
