from flask import Blueprint, request
from ...extensions import db
from ...responses import success
from ...security import issue_token, require_auth
from ...services import AuthService
from ...validation import parse_login, parse_signup

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/signup", methods=["POST"])
def register():
    data = parse_signup(request.get_json(silent=True))
    user = AuthService(db.session).register(data)
    return success({**user.to_dict(), "token": issue_token(user)}, "User registered successfully", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = parse_login(request.get_json(silent=True))
    user = AuthService(db.session).login(data)
    return success({**user.to_dict(), "token": issue_token(user)}, "Login successful")


@auth_bp.route("/me")
@require_auth
def me(ctx):
    return success(ctx.user.to_dict(with_created=True))
