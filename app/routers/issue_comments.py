"""
issue_comments.py

민원 댓글(Issue Comment) API 모음.

- 작성 : 해당 민원에 접근 가능한 모든 사용자 (학생은 본인 민원만)
- 조회 : 민원별 목록 / 단건
- 수정 / 삭제 : 작성자 본인 또는 관리자/직원

"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload
from starlette import status

from app.core.deps import get_current_user, get_db
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.issue import IssueComment
from app.models.user import Role, User
from app.routers.issues import ensure_issue_access, get_issue_or_404
from app.schemas.issue import IssueCommentCreate, IssueCommentResponse, IssueCommentUpdate

router = APIRouter(prefix="/issue-comments", tags=["issue-comments"])

MAX_COMMENT_LENGTH = 500


def _comment(comment: IssueComment) -> dict:
    return IssueCommentResponse.model_validate(comment).model_dump(mode="json")


def _clean_text(text: str | None) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment text is required", field="comment_text")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters", field="comment_text"
        )
    return text


def _get_comment(db: Session, comment_id: uuid.UUID) -> IssueComment:
    comment = db.get(IssueComment, comment_id)
    if not comment:
        raise NotFound("Comment not found")
    return comment


def _ensure_can_modify(comment: IssueComment, user: User) -> None:
    if comment.commented_by != user.id and user.role == Role.STUDENT:
        raise Forbidden("You can modify only your own comments")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_comment(
    data: IssueCommentCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    if not data.issue_id:
        raise ValidationError("Issue ID is required", field="issue_id")
    text = _clean_text(data.comment_text)

    issue = get_issue_or_404(db, data.issue_id)
    ensure_issue_access(db, issue, current)

    comment = IssueComment(issue_id=issue.id, commented_by=current.id, comment_text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return {"success": True, "message": "Comment added successfully", "data": _comment(comment)}


@router.get("/issue/{issue_id}")
def list_comments(
    issue_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    issue = get_issue_or_404(db, issue_id)
    ensure_issue_access(db, issue, current)

    rows = db.scalars(
        select(IssueComment)
        .options(joinedload(IssueComment.author))
        .where(IssueComment.issue_id == issue.id)
        .order_by(IssueComment.created_at.asc())
    ).all()
    return {"success": True, "message": "Comments fetched successfully", "data": [_comment(c) for c in rows]}


@router.get("/{comment_id}")
def get_comment(
    comment_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    comment = _get_comment(db, comment_id)
    ensure_issue_access(db, comment.issue, current)
    return {"success": True, "message": "Comment fetched successfully", "data": _comment(comment)}


@router.patch("/{comment_id}")
def update_comment(
    comment_id: uuid.UUID,
    data: IssueCommentUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    comment = _get_comment(db, comment_id)
    _ensure_can_modify(comment, current)

    comment.comment_text = _clean_text(data.comment_text)
    db.commit()
    db.refresh(comment)
    return {"success": True, "message": "Comment updated successfully", "data": _comment(comment)}


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    comment = _get_comment(db, comment_id)
    _ensure_can_modify(comment, current)

    db.delete(comment)
    db.commit()
    return {"success": True, "message": "Comment deleted successfully"}
