from datetime import date
from decimal import Decimal

import pytest

from expensetracker.errors import ConflictError, NotFoundError
from expensetracker.extensions import db
from expensetracker.models import Category, Expense, User
from expensetracker.security import AuthContext
from expensetracker.services import AuthService, CategoryService, ExpenseService
from expensetracker.validation import CategoryInput, ExpenseInput, SignupInput, parse_month


@pytest.fixture
def ctx(app):
    with app.app_context():
        user = AuthService(db.session).register(SignupInput("Lee", "lee@example.com", "secret123"))
        yield AuthContext(user_id=user.id, user=user)


def test_services_work_with_an_explicit_session(ctx):
    categories = CategoryService(db.session)
    cat = categories.create(ctx, CategoryInput("Travel", Decimal("300"), "#000000"))
    ExpenseService(db.session).create(
        ctx, ExpenseInput("Hotel", Decimal("120.00"), cat.id, date.today())
    )
    window = parse_month(date.today().strftime("%Y-%m"))
    rows = {r["name"]: r for r in categories.summary(ctx, window)}
    assert rows["Travel"]["totalSpent"] == 120.0
    assert rows["Travel"]["percentage"] == 40


def test_duplicate_category_raises_conflict(ctx):
    with pytest.raises(ConflictError):
        CategoryService(db.session).create(ctx, CategoryInput("Food", None, "#000000"))


def test_missing_expense_raises_not_found(ctx):
    with pytest.raises(NotFoundError):
        ExpenseService(db.session).get(ctx, "00000000-0000-0000-0000-000000000000")


def test_deleting_a_user_removes_their_rows(ctx):
    cat = db.session.query(Category).filter_by(user_id=ctx.user_id).first()
    ExpenseService(db.session).create(ctx, ExpenseInput("Lunch", Decimal("9.99"), cat.id, date.today()))
    db.session.delete(db.session.get(User, ctx.user_id))
    db.session.commit()
    assert db.session.query(Category).count() == 0
    assert db.session.query(Expense).count() == 0
