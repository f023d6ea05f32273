# academy/model/course.py
from ..extensions import db
from sqlalchemy.sql import func

class Course(db.Model):
    """Catalog row. Owned by the catalog service; read-only to commerce."""
    __tablename__ = "course"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    image = db.Column(db.String(1024))
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    is_published = db.Column(db.Boolean, nullable=False, default=False, index=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_snapshot(self):
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "image": self.image,
            "price": float(self.price or 0),
        }
