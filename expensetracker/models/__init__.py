from .user import User
from .category import Category, DEFAULT_COLOR
from .expense import Expense

__all__ = ["User", "Category", "Expense", "DEFAULT_COLOR"]
