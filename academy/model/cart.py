# academy/model/cart.py
from __future__ import annotations
from sqlalchemy.sql import func
from ..extensions import db


class Cart(db.Model):
    __tablename__ = "cart"

    id = db.Column(db.Integer, primary_key=True)
    # identity lives in the auth service; no FK on purpose
    user_id = db.Column(db.Integer, nullable=False, unique=True, index=True)
    # cached sum of item prices, always rewritten by a single UPDATE
    total = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    items = db.relationship(
        "CartItem",
        backref="cart",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CartItem.id.asc()"
    )

    def as_api(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "items": [i.as_api() for i in self.items],
            "item_count": len(self.items),
            "total": float(self.total or 0),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class CartItem(db.Model):
    __tablename__ = "cart_item"
    __table_args__ = (
        db.UniqueConstraint("cart_id", "course_id", name="uq_cart_item_cart_course"),
    )

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey("cart.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False, index=True)

    # price snapshot taken when the course was added
    price = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime, server_default=func.now())

    course = db.relationship("Course", lazy="joined")

    def as_api(self):
        c = self.course
        return {
            "id": self.id,
            "course_id": self.course_id,
            "price": float(self.price or 0),
            "course": c.as_snapshot() if c else {"id": self.course_id},
        }
