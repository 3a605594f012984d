import uuid
from dataclasses import dataclass
from functools import wraps

from flask_jwt_extended import create_access_token, get_current_user, verify_jwt_in_request

from .errors import AuthError, error_response
from .extensions import db, jwt
from .models import User


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, built once per request by :func:`require_auth`."""

    user_id: uuid.UUID
    user: User


def issue_token(user) -> str:
    return create_access_token(identity=str(user.id))


def require_auth(view):
    """Verify the bearer token and call ``view(ctx, *args, **kwargs)``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        user = get_current_user()
        return view(AuthContext(user_id=user.id, user=user), *args, **kwargs)

    return wrapper


@jwt.user_lookup_loader
def load_user(_jwt_header, jwt_data):
    try:
        user_id = uuid.UUID(str(jwt_data["sub"]))
    except (KeyError, ValueError):
        return None
    return db.session.get(User, user_id)


@jwt.user_lookup_error_loader
def user_not_found(_jwt_header, _jwt_data):
    return error_response(AuthError("User not found or unauthorized"))


@jwt.unauthorized_loader
def missing_token(_reason):
    return error_response(AuthError("Authorization token required"))


@jwt.invalid_token_loader
def invalid_token(_reason):
    return error_response(AuthError("Invalid authentication token"))


@jwt.expired_token_loader
def expired_token(_jwt_header, _jwt_data):
    return error_response(AuthError("Authentication token expired"))
