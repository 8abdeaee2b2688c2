from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    CHAIRMAN = "chairman"
    CO_CHAIRMAN = "co_chairman"
    UG_COORDINATOR = "ug_coordinator"
    CLASS_ADVISOR = "class_advisor"
    TEACHER = "teacher"
    STUDENT = "student"


class ReviewerRole(str, Enum):
    CLASS_ADVISOR = "class_advisor"
    UG_COORDINATOR = "ug_coordinator"
    CO_CHAIRMAN = "co_chairman"
    CHAIRMAN = "chairman"


class OutlineStatus(str, Enum):
    SUBMITTED = "submitted"
    COORDINATOR_REVIEW = "coordinator_review"
    CO_CHAIRMAN_REVIEW = "co_chairman_review"
    CHAIRMAN_REVIEW = "chairman_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUPERSEDED = "superseded"


# Statuses that always carry a current reviewer.
IN_REVIEW_STATUSES = frozenset(
    {
        OutlineStatus.SUBMITTED,
        OutlineStatus.COORDINATOR_REVIEW,
        OutlineStatus.CO_CHAIRMAN_REVIEW,
        OutlineStatus.CHAIRMAN_REVIEW,
    }
)


class ReviewDecision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class OutlineFileType(str, Enum):
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"


class SemesterType(str, Enum):
    FALL = "fall"
    SPRING = "spring"
    SUMMER = "summer"


class SemesterStatus(str, Enum):
    PLANNING = "planning"
    COURSE_ASSIGNMENT = "course_assignment"
    OUTLINE_SUBMISSION = "outline_submission"
    OUTLINE_REVIEW = "outline_review"
    SCHEDULING = "scheduling"
    ACTIVE = "active"
    COMPLETED = "completed"


class NotificationType(str, Enum):
    COURSE_ASSIGNED = "course_assigned"
    OUTLINE_SUBMITTED = "outline_submitted"
    OUTLINE_APPROVED = "outline_approved"
    OUTLINE_REJECTED = "outline_rejected"
    REVIEW_PENDING = "review_pending"
    SCHEDULING_OPEN = "scheduling_open"
    SLOT_BOOKED = "slot_booked"
    SEMESTER_UPDATE = "semester_update"
    GENERAL = "general"
