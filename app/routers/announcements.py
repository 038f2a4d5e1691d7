"""
announcements.py

공지사항(Announcement) API 모음.

- 작성 / 수정 / 삭제 : ADMIN / STAFF
- 목록 / 단건 조회 : 로그인한 모든 사용자 (제목·내용 검색, 카테고리 필터)

"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload
from starlette import status

from app.core.deps import get_current_staff, get_current_user, get_db
from app.core.exceptions import NotFound, ValidationError
from app.models.announcement import Announcement
from app.models.user import User
from app.schemas.announcement import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate
from app.schemas.common import clamp_page, page_meta

router = APIRouter(prefix="/announcements", tags=["announcements"])

MIN_TITLE_LENGTH = 3
MIN_MESSAGE_LENGTH = 10


def _announcement(item: Announcement) -> dict:
    return AnnouncementResponse.model_validate(item).model_dump(mode="json")


def _get_announcement(db: Session, announcement_id: uuid.UUID) -> Announcement:
    item = db.get(Announcement, announcement_id)
    if not item:
        raise NotFound("Announcement not found")
    return item


def _clean_title(title: str) -> str:
    title = title.strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise ValidationError(f"Title must be at least {MIN_TITLE_LENGTH} characters long", field="title")
    return title


def _clean_message(message: str) -> str:
    message = message.strip()
    if len(message) < MIN_MESSAGE_LENGTH:
        raise ValidationError(
            f"Message must be at least {MIN_MESSAGE_LENGTH} characters long", field="message"
        )
    return message


def _clean_category(category: str) -> str:
    category = category.strip().lower()
    if not category:
        raise ValidationError("Category cannot be empty", field="category")
    return category


@router.post("", status_code=status.HTTP_201_CREATED)
def create_announcement(
    data: AnnouncementCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_staff),
):
    if not data.title or not data.message:
        raise ValidationError("Title and message are required")

    item = Announcement(
        title=_clean_title(data.title),
        message=_clean_message(data.message),
        category=_clean_category(data.category),
        notice_url=(data.notice_url or "").strip() or None,
        created_by=current.id,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return {"success": True, "message": "Announcement created successfully", "data": _announcement(item)}


@router.get("")
def list_announcements(
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    page, limit = clamp_page(page, limit)
    stmt = select(Announcement)

    if category:
        stmt = stmt.where(Announcement.category == category.strip().lower())
    if search:
        term = f"%{search.strip()}%"
        stmt = stmt.where(or_(Announcement.title.ilike(term), Announcement.message.ilike(term)))

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.options(joinedload(Announcement.author))
        .order_by(Announcement.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return {
        "success": True,
        "message": "Announcements fetched successfully",
        "data": [_announcement(a) for a in rows],
        "pagination": page_meta(page, limit, total).model_dump(),
    }


@router.get("/{announcement_id}")
def get_announcement(
    announcement_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    item = _get_announcement(db, announcement_id)
    return {"success": True, "message": "Announcement fetched successfully", "data": _announcement(item)}


@router.patch("/{announcement_id}")
def update_announcement(
    announcement_id: uuid.UUID,
    data: AnnouncementUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    item = _get_announcement(db, announcement_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("No changes provided")

    if "title" in changes:
        item.title = _clean_title(changes["title"])
    if "message" in changes:
        item.message = _clean_message(changes["message"])
    if "category" in changes:
        item.category = _clean_category(changes["category"])
    if "notice_url" in changes:
        item.notice_url = changes["notice_url"].strip() or None

    db.commit()
    db.refresh(item)
    return {"success": True, "message": "Announcement updated successfully", "data": _announcement(item)}


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    item = _get_announcement(db, announcement_id)
    db.delete(item)
    db.commit()
    return {"success": True, "message": "Announcement deleted successfully"}
