import logging
import uuid
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func

from ..errors import ConflictError, NotFoundError
from ..models import Category, Expense
from ..validation import UNSET
from .base import BaseService

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "You already have a category with this name"
GREEN_BELOW = Decimal("60")
RED_ABOVE = Decimal("100")


def budget_percentage(spent, limit):
    """Share of the limit already spent, or ``None`` when there is no usable limit."""
    if limit is None or limit <= 0:
        return None
    return Decimal(spent) * 100 / Decimal(limit)


def budget_status(percentage):
    if percentage is None:
        return None
    if percentage < GREEN_BELOW:
        return "green"
    if percentage <= RED_ABOVE:
        return "yellow"
    return "red"


def round_percentage(value):
    if value is None:
        return None
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_id(raw):
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


class CategoryService(BaseService):
    def list(self, ctx):
        return (
            self.session.query(Category)
            .filter_by(user_id=ctx.user_id)
            .order_by(Category.name)
            .all()
        )

    def get(self, ctx, category_id):
        cid = parse_id(category_id)
        cat = None
        if cid is not None:
            cat = self.session.query(Category).filter_by(id=cid, user_id=ctx.user_id).first()
        if cat is None:
            raise NotFoundError("Category not found")
        return cat

    def _name_taken(self, ctx, name, exclude_id=None):
        q = self.session.query(Category.id).filter(Category.user_id == ctx.user_id, Category.name == name)
        if exclude_id is not None:
            q = q.filter(Category.id != exclude_id)
        return q.first() is not None

    def create(self, ctx, data):
        if self._name_taken(ctx, data.name):
            raise ConflictError(DUPLICATE_NAME)
        cat = Category(user_id=ctx.user_id, name=data.name, monthly_limit=data.monthly_limit, color=data.color)
        self.session.add(cat)
        self.commit(DUPLICATE_NAME)
        logger.info("User %s created category %s", ctx.user_id, cat.id)
        return cat

    def update(self, ctx, category_id, patch):
        cat = self.get(ctx, category_id)
        if patch.name is not UNSET and patch.name != cat.name:
            if self._name_taken(ctx, patch.name, exclude_id=cat.id):
                raise ConflictError(DUPLICATE_NAME)
            cat.name = patch.name
        if patch.monthly_limit is not UNSET:
            cat.monthly_limit = patch.monthly_limit
        if patch.color is not UNSET:
            cat.color = patch.color
        self.commit(DUPLICATE_NAME)
        logger.info("User %s updated category %s", ctx.user_id, cat.id)
        return cat

    def delete(self, ctx, category_id):
        cat = self.get(ctx, category_id)
        in_use = self.session.query(func.count(Expense.id)).filter(Expense.category_id == cat.id).scalar()
        if in_use:
            raise ConflictError(f"Cannot delete category. It is used by {in_use} expenses.")
        self.session.delete(cat)
        self.commit()
        logger.info("User %s deleted category %s", ctx.user_id, cat.id)

    def summary(self, ctx, window):
        """Spend per category inside ``window`` with its budget status."""
        spent_by_category = dict(
            self.session.query(Expense.category_id, func.coalesce(func.sum(Expense.amount), 0))
            .filter(
                Expense.user_id == ctx.user_id,
                Expense.category_id.isnot(None),
                Expense.expense_date >= window.start,
                Expense.expense_date <= window.end,
            )
            .group_by(Expense.category_id)
            .all()
        )

        rows = []
        for cat in self.list(ctx):
            spent = Decimal(spent_by_category.get(cat.id) or 0).quantize(Decimal("0.01"))
            percentage = budget_percentage(spent, cat.monthly_limit)
            rows.append({
                "id": str(cat.id),
                "name": cat.name,
                "color": cat.color,
                "monthlyLimit": float(cat.monthly_limit) if cat.monthly_limit is not None else None,
                "totalSpent": float(spent),
                "percentage": round_percentage(percentage),
                "status": budget_status(percentage),
            })
        return rows
