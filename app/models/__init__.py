# Base.metadata 에 모든 테이블을 등록하기 위한 import 모음
from app.models.user import User, Role, UserStatus  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.student import Student, StudentHistory  # noqa: F401
from app.models.leave_request import LeaveRequest, LeaveStatus  # noqa: F401
from app.models.disciplinary_case import DisciplinaryCase, CaseStatus  # noqa: F401
from app.models.issue import Issue, IssueComment, IssueCategory, IssueStatus  # noqa: F401
from app.models.payment import Payment, PaymentStatus  # noqa: F401
from app.models.announcement import Announcement  # noqa: F401
