# academy/enrollment/routes.py
from flask import request

from ..utils.api import ok
from ..utils.decorators import current_user_id, login_required
from ..utils.paging import normalize_paging
from ..services import EnrollmentService, commerce_repo
from . import bp


@bp.get("")
@login_required
def list_enrollments():
    page, per_page = normalize_paging(request.args.get("page"), request.args.get("per_page"))
    page_data = EnrollmentService(commerce_repo()).list_for_user(current_user_id(), page, per_page)
    return ok("enrollments", {
        "meta": page_data["meta"],
        "items": [e.as_api() for e in page_data["items"]],
    })


@bp.get("/<int:course_id>")
@login_required
def get_enrollment(course_id: int):
    """Lesson gating asks here whether the user may open non-preview content."""
    e = EnrollmentService(commerce_repo()).get_for_user(current_user_id(), course_id)
    return ok("enrollment", {"enrolled": True, "enrollment": e.as_api()})
