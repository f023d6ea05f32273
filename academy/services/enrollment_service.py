import logging

from sqlalchemy.exc import IntegrityError

from ..model import Enrollment
from ..utils.errors import conflict, not_found
from ..utils.paging import paginate
from .repository import CommerceRepository

log = logging.getLogger(__name__)


class EnrollmentService:
    """Grants course access. One enrollment per (user, course)."""

    def __init__(self, repo: CommerceRepository):
        self.repo = repo

    def activate(self, user_id: int, course_id: int, order_id: int | None = None) -> Enrollment:
        """Create-if-absent. Does not commit; runs inside the caller's transaction.

        A concurrent insert of the same pair loses on the unique constraint
        at flush time and is reported as Conflict.
        """
        if self.repo.find_enrollment(user_id, course_id) is not None:
            raise conflict(f"already enrolled in course {course_id}")
        enrollment = self.repo.add(Enrollment(
            user_id=user_id,
            course_id=course_id,
            order_id=order_id,
            progress=0,
            certificate_issued=False,
        ))
        try:
            self.repo.flush()
        except IntegrityError:
            log.warning("enrollment.race user=%s course=%s", user_id, course_id)
            raise conflict(f"already enrolled in course {course_id}")
        return enrollment

    def is_enrolled(self, user_id: int, course_id: int) -> bool:
        return self.repo.find_enrollment(user_id, course_id) is not None

    def get_for_user(self, user_id: int, course_id: int) -> Enrollment:
        e = self.repo.find_enrollment(user_id, course_id)
        if e is None:
            raise not_found("enrollment not found")
        return e

    def list_for_user(self, user_id: int, page=1, per_page=20):
        return paginate(self.repo.enrollments_query(user_id), page, per_page)
