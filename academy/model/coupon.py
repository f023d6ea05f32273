# --- academy/model/coupon.py ---

from ..extensions import db
from sqlalchemy.sql import func

COUPON_TYPES = ("percentage", "fixed")

class Coupon(db.Model):
    __tablename__ = "coupon"
    __table_args__ = (
        db.CheckConstraint(
            "usage_limit IS NULL OR used_count <= usage_limit",
            name="ck_coupon_usage_within_limit",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    # stored upper-case; looked up case-insensitively
    code = db.Column(db.String(64), unique=True, nullable=False, index=True)

    # "percentage" or "fixed"
    ctype = db.Column(db.String(16), nullable=False, default="percentage")
    value = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    # Optional constraints
    min_purchase = db.Column(db.Numeric(12, 2), nullable=True)   # require subtotal >= this
    max_discount = db.Column(db.Numeric(12, 2), nullable=True)   # cap, percentage only
    usage_limit = db.Column(db.Integer, nullable=True)           # global usage cap
    used_count = db.Column(db.Integer, nullable=False, default=0)
    valid_from = db.Column(db.DateTime, nullable=False)
    valid_until = db.Column(db.DateTime, nullable=False)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_api(self):
        return {
            "id": self.id,
            "code": self.code,
            "type": self.ctype,
            "value": float(self.value or 0),
            "min_purchase": float(self.min_purchase) if self.min_purchase is not None else None,
            "max_discount": float(self.max_discount) if self.max_discount is not None else None,
            "usage_limit": self.usage_limit,
            "used_count": self.used_count,
            "is_active": self.is_active,
            "valid_from": self.valid_from.isoformat() if self.valid_from else None,
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
        }
