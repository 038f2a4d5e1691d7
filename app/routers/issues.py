"""
issues.py

민원(Issue) API 모음.

주요 기능:
- 학생 민원 등록 (제목 3자 이상, 설명 10~500자, 카테고리 검증)
- 목록 조회 (학생: 본인 것만, 관리자/직원: 상태·카테고리·학번·검색 필터)
- 처리 상태 변경 (관리자/직원)
- 수정 (학생 본인, pending 상태에서만)
- 삭제 (학생: 본인 pending 건만, 관리자/직원: 전체)

"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_staff, get_current_student, get_current_user, get_db
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.issue import Issue, IssueCategory, IssueStatus
from app.models.student import Student
from app.models.user import Role, User
from app.schemas.common import clamp_page, page_meta
from app.schemas.issue import IssueCreate, IssueResponse, IssueStatusUpdate, IssueUpdate
from app.services.students import require_student_profile

router = APIRouter(prefix="/issues", tags=["issues"])

MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 500


def _issue(issue: Issue) -> dict:
    return IssueResponse.model_validate(issue).model_dump(mode="json")


def get_issue_or_404(db: Session, issue_id: uuid.UUID) -> Issue:
    issue = db.get(Issue, issue_id)
    if not issue:
        raise NotFound("Issue not found")
    return issue


def ensure_issue_access(db: Session, issue: Issue, user: User) -> None:
    """학생은 본인이 제기한 민원만 접근 가능."""
    if user.role == Role.STUDENT and issue.raised_by != require_student_profile(db, user).id:
        raise Forbidden("Access denied")


def _validate_title(title: str) -> str:
    title = title.strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise ValidationError(
            f"Title must be at least {MIN_TITLE_LENGTH} characters long", field="title"
        )
    return title


def _validate_description(description: str) -> str:
    description = description.strip()
    if not MIN_DESCRIPTION_LENGTH <= len(description) <= MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be between {MIN_DESCRIPTION_LENGTH} and {MAX_DESCRIPTION_LENGTH} characters",
            field="description",
        )
    return description


def _parse_category(category: str) -> IssueCategory:
    try:
        return IssueCategory(category.strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in IssueCategory)
        raise ValidationError(f"Category must be one of: {allowed}", field="category")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_issue(
    data: IssueCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_student),
):
    if not data.title or not data.description:
        raise ValidationError("Title and description are required")

    issue = Issue(
        title=_validate_title(data.title),
        description=_validate_description(data.description),
        category=_parse_category(data.category) if data.category else IssueCategory.OTHER,
        raised_by=require_student_profile(db, current).id,
    )
    db.add(issue)
    db.commit()
    db.refresh(issue)
    return {"success": True, "message": "Issue raised successfully", "data": _issue(issue)}


@router.get("")
def list_issues(
    page: int = 1,
    limit: int = 10,
    status_filter: IssueStatus | None = Query(None, alias="status"),
    category: IssueCategory | None = None,
    sid: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    page, limit = clamp_page(page, limit)
    stmt = select(Issue)

    if current.role == Role.STUDENT:
        stmt = stmt.where(Issue.raised_by == require_student_profile(db, current).id)
    elif sid:
        # 학번 앞자리로 검색
        stmt = stmt.join(Student, Student.id == Issue.raised_by).where(
            Student.sid.startswith(sid.strip(), autoescape=True)
        )

    if status_filter is not None:
        stmt = stmt.where(Issue.status == status_filter)
    if category is not None:
        stmt = stmt.where(Issue.category == category)
    if search:
        term = f"%{search.strip()}%"
        stmt = stmt.where(or_(Issue.title.ilike(term), Issue.description.ilike(term)))

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.order_by(Issue.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return {
        "success": True,
        "message": "Issues fetched successfully",
        "data": [_issue(i) for i in rows],
        "pagination": page_meta(page, limit, total).model_dump(),
    }


@router.get("/{issue_id}")
def get_issue(
    issue_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    issue = get_issue_or_404(db, issue_id)
    ensure_issue_access(db, issue, current)
    return {"success": True, "message": "Issue fetched successfully", "data": _issue(issue)}


@router.patch("/{issue_id}/status")
def update_issue_status(
    issue_id: uuid.UUID,
    data: IssueStatusUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    issue = get_issue_or_404(db, issue_id)
    issue.status = data.status
    db.commit()
    db.refresh(issue)
    return {"success": True, "message": "Issue status updated successfully", "data": _issue(issue)}


@router.patch("/{issue_id}")
def update_issue(
    issue_id: uuid.UUID,
    data: IssueUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_student),
):
    issue = get_issue_or_404(db, issue_id)
    ensure_issue_access(db, issue, current)
    if issue.status != IssueStatus.PENDING:
        raise ValidationError("Only pending issues can be edited")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("No changes provided")

    if "title" in changes:
        issue.title = _validate_title(changes["title"])
    if "description" in changes:
        issue.description = _validate_description(changes["description"])
    if "category" in changes:
        issue.category = _parse_category(changes["category"])

    db.commit()
    db.refresh(issue)
    return {"success": True, "message": "Issue updated successfully", "data": _issue(issue)}


@router.delete("/{issue_id}")
def delete_issue(
    issue_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    issue = get_issue_or_404(db, issue_id)

    if current.role == Role.STUDENT:
        ensure_issue_access(db, issue, current)
        if issue.status != IssueStatus.PENDING:
            raise ValidationError("Only pending issues can be deleted")

    db.delete(issue)
    db.commit()
    return {"success": True, "message": "Issue deleted successfully"}
