from flask import Blueprint, request
from ...extensions import db
from ...responses import success
from ...security import require_auth
from ...services import ExpenseService
from ...validation import parse_expense, parse_expense_patch, parse_expense_query, parse_period

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.route("", methods=["GET"])
@require_auth
def list_expenses(ctx):
    query = parse_expense_query(request.args)
    items, total, pagination = ExpenseService(db.session).list(ctx, query)
    return success([e.to_dict() for e in items], count=len(items), total=total, pagination=pagination)


@expenses_bp.route("/summary")
@require_auth
def expense_summary(ctx):
    period = parse_period(request.args.get("period"))
    return success(ExpenseService(db.session).summary(ctx, period))


@expenses_bp.route("/<expense_id>")
@require_auth
def get_expense(ctx, expense_id):
    exp = ExpenseService(db.session).get(ctx, expense_id)
    return success(exp.to_dict())


@expenses_bp.route("", methods=["POST"])
@require_auth
def create_expense(ctx):
    data = parse_expense(request.get_json(silent=True))
    exp = ExpenseService(db.session).create(ctx, data)
    return success(exp.to_dict(), "Expense created successfully", 201)


@expenses_bp.route("/<expense_id>", methods=["PUT"])
@require_auth
def update_expense(ctx, expense_id):
    patch = parse_expense_patch(request.get_json(silent=True))
    exp = ExpenseService(db.session).update(ctx, expense_id, patch)
    return success(exp.to_dict(), "Expense updated successfully")


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@require_auth
def delete_expense(ctx, expense_id):
    ExpenseService(db.session).delete(ctx, expense_id)
    return success(message="Expense deleted successfully")
