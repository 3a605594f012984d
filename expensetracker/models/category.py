import uuid
from ..extensions import db

DEFAULT_COLOR = "#6366F1"


class Category(db.Model):
    __tablename__ = "categories"
    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    name = db.Column(db.Text, nullable=False)
    monthly_limit = db.Column(db.Numeric(10, 2), nullable=True)
    color = db.Column(db.String(7), nullable=False, default=DEFAULT_COLOR)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    expenses = db.relationship("Expense", backref="category", lazy=True)

    __table_args__ = (
        db.UniqueConstraint("user_id", "name", name="categories_user_id_name_key"),
    )

    def to_dict(self):
        return {
            "id": str(self.id),
            "userId": str(self.user_id) if self.user_id else None,
            "name": self.name,
            "color": self.color,
            "monthlyLimit": float(self.monthly_limit) if self.monthly_limit is not None else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def to_brief(self):
        return {"id": str(self.id), "name": self.name, "color": self.color}
