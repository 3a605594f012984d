import logging
import math
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import extract, func

from ..errors import NotFoundError, ValidationError
from ..models import Category, Expense
from ..validation import UNSET
from .base import BaseService
from .categories import parse_id, round_percentage

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": Expense.expense_date,
    "amount": Expense.amount,
    "title": Expense.title,
    "createdAt": Expense.created_at,
}


def _money(value):
    return Decimal(value or 0).quantize(Decimal("0.01"))


def summary_window(period, today):
    """Return ``(start, end, bucket)`` for a summary period ending ``today``.

    ``week`` and ``month`` cover the trailing 7 and 30 days with daily buckets,
    ``year`` covers the trailing 12 calendar months with monthly buckets.
    """
    if period == "week":
        return today - timedelta(days=6), today, "day"
    if period == "year":
        year, month = today.year, today.month - 11
        if month <= 0:
            month += 12
            year -= 1
        return date(year, month, 1), today, "month"
    return today - timedelta(days=29), today, "day"


class ExpenseService(BaseService):
    def _owned(self, ctx):
        return self.session.query(Expense).filter(Expense.user_id == ctx.user_id)

    def _check_category(self, ctx, category_id):
        owned = (
            self.session.query(Category.id)
            .filter(Category.id == category_id, Category.user_id == ctx.user_id)
            .first()
        )
        if owned is None:
            raise ValidationError("Invalid category", errors=[{"field": "categoryId", "message": "Unknown category"}])

    def list(self, ctx, query):
        q = self._owned(ctx)
        if query.category_id is not None:
            q = q.filter(Expense.category_id == query.category_id)
        if query.start_date is not None:
            q = q.filter(Expense.expense_date >= query.start_date)
        if query.end_date is not None:
            q = q.filter(Expense.expense_date <= query.end_date)

        total = q.count()
        column = SORT_COLUMNS[query.sort_by]
        ordering = column.asc() if query.sort_order == "asc" else column.desc()
        items = (
            q.order_by(ordering, Expense.id)
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
            .all()
        )
        pagination = {
            "page": query.page,
            "limit": query.limit,
            "totalPages": math.ceil(total / query.limit),
        }
        return items, total, pagination

    def get(self, ctx, expense_id):
        eid = parse_id(expense_id)
        exp = None
        if eid is not None:
            exp = self._owned(ctx).filter(Expense.id == eid).first()
        if exp is None:
            raise NotFoundError("Expense not found")
        return exp

    def create(self, ctx, data):
        self._check_category(ctx, data.category_id)
        exp = Expense(
            user_id=ctx.user_id,
            category_id=data.category_id,
            title=data.title,
            amount=data.amount,
            expense_date=data.expense_date,
            notes=data.notes,
        )
        self.session.add(exp)
        self.commit()
        logger.info("User %s recorded expense %s (%s)", ctx.user_id, exp.id, data.amount)
        return exp

    def update(self, ctx, expense_id, patch):
        exp = self.get(ctx, expense_id)
        if patch.category_id is not UNSET:
            if patch.category_id is not None:
                self._check_category(ctx, patch.category_id)
            exp.category_id = patch.category_id
        if patch.title is not UNSET:
            exp.title = patch.title
        if patch.amount is not UNSET:
            exp.amount = patch.amount
        if patch.expense_date is not UNSET:
            exp.expense_date = patch.expense_date
        if patch.notes is not UNSET:
            exp.notes = patch.notes
        self.commit()
        logger.info("User %s updated expense %s", ctx.user_id, exp.id)
        return exp

    def delete(self, ctx, expense_id):
        exp = self.get(ctx, expense_id)
        self.session.delete(exp)
        self.commit()
        logger.info("User %s deleted expense %s", ctx.user_id, exp.id)

    def summary(self, ctx, period, today=None):
        today = today or date.today()
        start, end, bucket = summary_window(period, today)
        window = (
            Expense.user_id == ctx.user_id,
            Expense.expense_date >= start,
            Expense.expense_date <= end,
        )

        total_col = func.sum(Expense.amount).label("total")
        by_category = (
            self.session.query(Category.id, Category.name, Category.color, total_col)
            .select_from(Expense)
            .outerjoin(Category, Expense.category_id == Category.id)
            .filter(*window)
            .group_by(Category.id, Category.name, Category.color)
            .order_by(total_col.desc())
            .all()
        )
        category_data = [
            {
                "id": str(cid) if cid else None,
                "name": name if cid else "Uncategorized",
                "color": color,
                "value": _money(total),
            }
            for cid, name, color, total in by_category
        ]
        total_expenses = sum((item["value"] for item in category_data), Decimal("0"))
        for item in category_data:
            share = item["value"] * 100 / total_expenses if total_expenses else Decimal("0")
            item["percentage"] = round_percentage(share)
            item["value"] = float(item["value"])

        if bucket == "day":
            rows = (
                self.session.query(Expense.expense_date, func.sum(Expense.amount))
                .filter(*window)
                .group_by(Expense.expense_date)
                .order_by(Expense.expense_date)
                .all()
            )
            series = [{"period": day.isoformat(), "amount": float(_money(amount))} for day, amount in rows]
        else:
            year_col = extract("year", Expense.expense_date)
            month_col = extract("month", Expense.expense_date)
            rows = (
                self.session.query(year_col, month_col, func.sum(Expense.amount))
                .filter(*window)
                .group_by(year_col, month_col)
                .order_by(year_col, month_col)
                .all()
            )
            series = [
                {"period": f"{int(y):04d}-{int(m):02d}", "amount": float(_money(amount))}
                for y, m, amount in rows
            ]

        return {
            "totalExpenses": float(total_expenses),
            "categoryData": category_data,
            "timeSeriesData": series,
            "period": period,
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
        }
