"""
students.py

학생 프로필 및 입사(Enrollment) API 모음.

주요 기능:
- 입사 처리 (User + Room 배정 + Student 를 한 트랜잭션으로 생성, ADMIN 전용)
- 학생 목록 조회 (ADMIN / STAFF)
- 본인 프로필 조회 (학생), 특정 학생 프로필 조회 (ADMIN / STAFF)
- 본인 프로필 수정 (주소 / 보호자명만)
- 관리자 프로필 수정 (방 이동 포함)
- 프로필 삭제 (ADMIN 전용, 방 인원 반납)

관련 파일:
- app.services.enrollment  : 입사 트랜잭션
- app.services.students    : 조회 / 수정 / 삭제

"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_admin, get_current_staff, get_current_user, get_db
from app.core.exceptions import Forbidden
from app.db.session import unit_of_work
from app.models.user import User
from app.schemas.common import clamp_page, page_meta
from app.schemas.student import (
    EnrollRequest,
    EnrollResponse,
    StudentResponse,
    StudentAdminUpdate,
    StudentSelfUpdate,
    StudentWithUserResponse,
)
from app.schemas.user import UserResponse
from app.services import students as student_service
from app.services.enrollment import enroll

router = APIRouter(prefix="/students", tags=["students"])


def _student(student) -> dict:
    return StudentWithUserResponse.model_validate(student).model_dump(mode="json")


"""
입사 처리 API

- 검증 실패 400 / 권한 없음 403 / 중복·정원 초과 409 / DB 장애 500
- 성공 시 201 과 함께 {user, student} 반환 (비밀번호 해시 제외)

"""

@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_student(
    data: EnrollRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user, student = enroll(db, actor=current_admin, data=data.model_dump())
    result = EnrollResponse(
        user=UserResponse.model_validate(user),
        student=StudentResponse.model_validate(student),
    )
    return {
        "success": True,
        "message": "Student created successfully",
        "data": result.model_dump(mode="json"),
    }


# 학생 목록 (ADMIN / STAFF)
@router.get("/getall")
def list_students(
    page: int = 1,
    limit: int = 10,
    block: str | None = None,
    branch: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    page, limit = clamp_page(page, limit)
    rows, total = student_service.list_students(
        db, page=page, limit=limit, block=block, branch=branch, search=search
    )
    return {
        "success": True,
        "message": "Students fetched successfully",
        "data": [_student(s) for s in rows],
        "pagination": page_meta(page, limit, total).model_dump(),
    }


# 본인 프로필 조회
@router.get("/profile")
def get_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    student = student_service.get_by_user_id(db, current_user.id)
    return {"success": True, "message": "Student profile fetched successfully", "data": _student(student)}


# 특정 학생 프로필 조회 (ADMIN / STAFF)
@router.get("/profile/{user_id}")
def get_profile(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    student = student_service.get_by_user_id(db, user_id)
    return {"success": True, "message": "Student profile fetched successfully", "data": _student(student)}


# 관리자/직원 프로필 수정 (/{user_id} 보다 먼저 등록)
@router.patch("/edit/{user_id}")
def admin_update_profile(
    user_id: uuid.UUID,
    data: StudentAdminUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_staff),
):
    with unit_of_work(db):
        student = student_service.get_by_user_id(db, user_id)
        student_service.update_profile(
            db, actor=current, student=student, changes=data.model_dump(exclude_unset=True), admin=True
        )
    db.refresh(student)
    return {"success": True, "message": "Student profile updated successfully", "data": _student(student)}


# 학생 본인 프로필 수정 (주소 / 보호자명만)
@router.patch("/{user_id}")
def update_own_profile(
    user_id: uuid.UUID,
    data: StudentSelfUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if current_user.id != user_id:
        raise Forbidden("You can update only your own profile")

    with unit_of_work(db):
        student = student_service.get_by_user_id(db, user_id)
        student_service.update_profile(
            db, actor=current_user, student=student, changes=data.model_dump(exclude_unset=True), admin=False
        )
    db.refresh(student)
    return {"success": True, "message": "Student profile updated successfully", "data": _student(student)}


# 학생 프로필 삭제 (ADMIN 전용)
@router.delete("/{user_id}")
def delete_profile(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    with unit_of_work(db):
        student_service.delete_student(db, user_id=user_id)
    return {"success": True, "message": "Student profile deleted successfully"}
