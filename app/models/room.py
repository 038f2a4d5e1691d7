"""
room.py

방(Room) 모델 정의 파일.

방은 (block, room_number) 조합으로 식별되며,
정원(capacity)과 현재 인원(occupancy) 카운터를 가진다.

핵심 불변식:
- 0 <= occupancy <= capacity
- capacity >= 1
- (block, room_number) 는 전역 고유

occupancy 는 app.services.rooms 의 조건부 UPDATE 로만 변경한다.
애플리케이션에서 읽고-더하고-쓰는 방식으로 수정하지 않는다.

"""

import uuid
from typing import List

from sqlalchemy import Boolean, CheckConstraint, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin


def normalize_block(block: str) -> str:
    return block.strip().lower()


class Room(TimestampMixin, Base):
    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("block", "room_number", name="uq_rooms_block_room_number"),
        CheckConstraint("capacity >= 1", name="ck_rooms_capacity_positive"),
        CheckConstraint("occupancy >= 0 AND occupancy <= capacity", name="ck_rooms_occupancy_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    block: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    floor: Mapped[int | None] = mapped_column(Integer, nullable=True)

    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    occupancy: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # False = 보수 공사 / 사용 중지
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    yearly_rent: Mapped[int] = mapped_column(Integer, nullable=False, default=85000)

    occupants: Mapped[List["Student"]] = relationship(back_populates="room")
