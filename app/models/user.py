"""
user.py

사용자(User) 및 권한(Role) / 계정 상태(UserStatus) 모델 정의 파일.

이 파일은 기숙사 시스템 사용자(학생, 관리자, 직원)의 기본 정보와
권한(Role), 활성 상태(Status), 인증 관련 정보를 관리한다.

모든 인증, 권한, 학생 프로필, 결제 기능의 기준이 되는 핵심 모델이다.

"""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import Enum as SAEnum, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin



"""
사용자 권한(Role) 정의

- STUDENT : 기숙사생 (학생 프로필 필요)
- ADMIN   : 관리자 (입사 처리, 방 관리)
- STAFF   : 직원 (조회 / 휴가 승인 / 민원 처리)

"""

class Role(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"
    STAFF = "staff"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"



"""
사용자(User) 모델

- email / phone 은 전역 고유값
- 참조되는 사용자는 삭제하지 않고 status=inactive 로 비활성화
- token_version 으로 로그아웃 시 기존 access token 무효화 지원

"""

class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(10), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.STUDENT,
    )
    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name="user_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    token_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    student: Mapped[Optional["Student"]] = relationship(back_populates="user", uselist=False)
