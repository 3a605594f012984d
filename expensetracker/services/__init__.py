from .auth import AuthService
from .categories import CategoryService
from .expenses import ExpenseService

__all__ = ["AuthService", "CategoryService", "ExpenseService"]
