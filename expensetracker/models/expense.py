import uuid
from ..extensions import db


class Expense(db.Model):
    __tablename__ = "expenses"
    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    category_id = db.Column(db.Uuid, db.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    title = db.Column(db.Text, nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    expense_date = db.Column(db.Date, nullable=False)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="expenses_amount_positive"),
    )

    def to_dict(self):
        return {
            "id": str(self.id),
            "userId": str(self.user_id) if self.user_id else None,
            "categoryId": str(self.category_id) if self.category_id else None,
            "title": self.title,
            "amount": float(self.amount),
            "date": self.expense_date.isoformat(),
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "category": self.category.to_brief() if self.category is not None else None,
        }
