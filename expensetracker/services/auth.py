import logging
from decimal import Decimal

from ..errors import AuthError, ConflictError
from ..models import Category, User
from .base import BaseService

logger = logging.getLogger(__name__)

# Starter set every new account receives
DEFAULT_CATEGORIES = [
    ("Food", Decimal("500"), "#FF5733"),
    ("Transport", Decimal("200"), "#33FF57"),
    ("Rent", Decimal("1000"), "#3357FF"),
    ("Utilities", Decimal("150"), "#F3FF33"),
    ("Entertainment", Decimal("200"), "#FF33F3"),
]

DUPLICATE_EMAIL = "User with this email already exists"


class AuthService(BaseService):
    def register(self, data):
        if self.session.query(User).filter_by(email=data.email).first():
            raise ConflictError(DUPLICATE_EMAIL)

        user = User(name=data.name, email=data.email)
        user.set_password(data.password)
        for name, limit, color in DEFAULT_CATEGORIES:
            user.categories.append(Category(name=name, monthly_limit=limit, color=color))
        self.session.add(user)
        self.commit(DUPLICATE_EMAIL)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, data):
        user = self.session.query(User).filter_by(email=data.email).first()
        # same answer for unknown email and wrong password
        if user is None or not user.check_password(data.password):
            raise AuthError("Invalid credentials")
        return user
