from datetime import datetime, timezone
from ..extensions import db

ORDER_STATUS_COMPLETED = "completed"


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint("total >= 0", name="ck_order_total_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(40), unique=True, nullable=False, index=True)  # e.g. "ORD-1761033600000-K3J9Z2Q"
    status = db.Column(db.String(20), nullable=False, default=ORDER_STATUS_COMPLETED, index=True)

    user_id = db.Column(db.Integer, nullable=False, index=True)
    coupon_id = db.Column(db.Integer, db.ForeignKey("coupon.id"), nullable=True, index=True)

    # Money snapshot
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)
    discount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime, default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=_utcnow)

    items = db.relationship(
        "OrderItem",
        backref="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id.asc()",
    )
    coupon = db.relationship("Coupon", lazy="joined")

    def as_api(self):
        return {
            "id": self.id,
            "order_number": self.order_number,
            "status": self.status,
            "user_id": self.user_id,
            "coupon": {"id": self.coupon.id, "code": self.coupon.code} if self.coupon else None,
            "money": {
                "subtotal": float(self.subtotal or 0),
                "discount": float(self.discount or 0),
                "total": float(self.total or 0),
            },
            "items": [i.as_api() for i in self.items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)

    # snapshot; stays valid if the catalog row changes later
    course_id = db.Column(db.Integer, index=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)

    course = db.relationship(
        "Course",
        primaryjoin="foreign(OrderItem.course_id) == Course.id",
        lazy="joined",
        viewonly=True,
    )

    def as_api(self):
        c = self.course
        return {
            "course_id": self.course_id,
            "title": self.title,
            "price": float(self.price or 0),
            "course": c.as_snapshot() if c else None,
        }
