# academy/model/enrollment.py
from sqlalchemy.sql import func
from ..extensions import db


class Enrollment(db.Model):
    """Access grant for one (user, course). The unique constraint is what
    prevents double purchase; service-level checks are only a fast path."""
    __tablename__ = "enrollment"
    __table_args__ = (
        db.UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
        db.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_enrollment_progress_range"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False, index=True)
    # null for enrollments granted outside checkout
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=True, index=True)

    progress = db.Column(db.Integer, nullable=False, default=0)
    certificate_issued = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, server_default=func.now(), index=True)

    course = db.relationship("Course", lazy="joined")

    def as_api(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "order_id": self.order_id,
            "progress": self.progress,
            "certificate_issued": self.certificate_issued,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "course": self.course.as_snapshot() if self.course else {"id": self.course_id},
        }
