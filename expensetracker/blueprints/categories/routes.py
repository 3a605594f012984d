from flask import Blueprint, request
from ...extensions import db
from ...responses import success
from ...security import require_auth
from ...services import CategoryService
from ...validation import parse_category, parse_category_patch, parse_month

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.route("", methods=["GET"])
@require_auth
def list_categories(ctx):
    cats = CategoryService(db.session).list(ctx)
    return success([c.to_dict() for c in cats], count=len(cats))


@categories_bp.route("/summary")
@require_auth
def category_summary(ctx):
    window = parse_month(request.args.get("month"))
    rows = CategoryService(db.session).summary(ctx, window)
    return success(rows, month=window.month)


@categories_bp.route("/<category_id>")
@require_auth
def get_category(ctx, category_id):
    cat = CategoryService(db.session).get(ctx, category_id)
    return success(cat.to_dict())


@categories_bp.route("", methods=["POST"])
@require_auth
def create_category(ctx):
    data = parse_category(request.get_json(silent=True))
    cat = CategoryService(db.session).create(ctx, data)
    return success(cat.to_dict(), "Category created successfully", 201)


@categories_bp.route("/<category_id>", methods=["PUT"])
@require_auth
def update_category(ctx, category_id):
    patch = parse_category_patch(request.get_json(silent=True))
    cat = CategoryService(db.session).update(ctx, category_id, patch)
    return success(cat.to_dict(), "Category updated successfully")


@categories_bp.route("/<category_id>", methods=["DELETE"])
@require_auth
def delete_category(ctx, category_id):
    CategoryService(db.session).delete(ctx, category_id)
    return success(message="Category deleted successfully")
