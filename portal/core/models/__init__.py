from portal.auth.models import User
from portal.core.models.semester import Semester, SemesterAdvisor
from portal.core.models.course import Course
from portal.core.models.course_assignment import CourseAssignment
from portal.core.models.course_outline import CourseOutline
from portal.core.models.outline_review import OutlineReview
from portal.core.models.class_booking import ClassBooking
from portal.core.models.notification import Notification
from portal.core.models.audit_log import AuditLog

__all__ = [
    "User",
    "Semester",
    "SemesterAdvisor",
    "Course",
    "CourseAssignment",
    "CourseOutline",
    "OutlineReview",
    "ClassBooking",
    "Notification",
    "AuditLog",
]
