"""
services/rooms.py

방(Room Inventory) 도메인의 비즈니스 로직 모음.

이 파일은 방 생성/조회/수정과 함께
입사·퇴사 시 인원(occupancy) 카운터를 증감하는 핵심 규칙을 담당한다.

핵심 불변식:
- 0 <= occupancy <= capacity
- occupancy 는 조건부 UPDATE(compare-and-swap) 한 문장으로만 변경
  (읽은 값에 +1 해서 다시 쓰는 방식은 동시 입사 시 정원을 넘길 수 있음)

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 트랜잭션 제어(commit/rollback)는 호출 측에서 수행
- 방 정보(block / room_number)가 바뀌면 거주 학생의 비정규화 값도 함께 갱신

관련 파일:
- app.models.room          : Room 모델
- app.models.student       : 비정규화 block / room_number 보유
- app.services.enrollment  : allocate 사용
- app.services.students    : allocate / release 사용
- app.routers.rooms        : 방 관리 API

"""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Conflict, NotFound, RoomFullError, ValidationError
from app.models.room import Room, normalize_block
from app.models.student import Student

logger = logging.getLogger(__name__)


def get_room(db: Session, room_id: uuid.UUID) -> Room:
    room = db.get(Room, room_id)
    if not room:
        raise NotFound("Room not found", field="room_id")
    return room


def find_room(db: Session, *, block: str, room_number: str) -> Room | None:
    # populate_existing: 조건부 UPDATE 직후 identity map 의 오래된 occupancy 를 덮어쓴다
    return db.scalar(
        select(Room)
        .where(Room.block == block, Room.room_number == room_number)
        .execution_options(populate_existing=True)
    )


def _try_increment(db: Session, *, block: str, room_number: str) -> bool:
    result = db.execute(
        update(Room)
        .where(
            Room.block == block,
            Room.room_number == room_number,
            Room.is_active.is_(True),
            Room.occupancy < Room.capacity,
        )
        .values(occupancy=Room.occupancy + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


"""
방 배정 (allocate)

1) (block, room_number) 가 일치하고 occupancy < capacity 인 방의 occupancy 를
   한 문장의 조건부 UPDATE 로 +1
2) 갱신된 행이 없으면
   - 방이 있고 가득 찬 경우      → RoomFullError
   - 방이 있지만 비활성인 경우   → Conflict
   - 방이 없는 경우              → 기본 정원으로 새 방 생성 (occupancy=1)
3) 새 방 생성이 동시 요청과 겹쳐 고유 제약에 걸리면 SAVEPOINT 만 되돌리고
   1) 을 한 번 더 시도

"""

def allocate(db: Session, *, block: str, room_number: str) -> Room:
    block = normalize_block(block)
    room_number = room_number.strip()

    for attempt in range(2):
        if _try_increment(db, block=block, room_number=room_number):
            return find_room(db, block=block, room_number=room_number)

        existing = find_room(db, block=block, room_number=room_number)
        if existing:
            if not existing.is_active:
                raise Conflict("Room is not active", field="room_number")
            raise RoomFullError(block, room_number)

        try:
            with db.begin_nested():
                room = Room(
                    block=block,
                    room_number=room_number,
                    capacity=settings.DEFAULT_ROOM_CAPACITY,
                    occupancy=1,
                    yearly_rent=settings.DEFAULT_YEARLY_RENT,
                    is_active=True,
                )
                db.add(room)
        except IntegrityError:
            # 다른 요청이 같은 방을 먼저 만들었음 → 만들어진 방에 배정 재시도
            if attempt:
                raise
            continue

        logger.info("room created on enrollment", extra={"block": block, "room_number": room_number})
        return room


"""
방 인원 반납 (release)

- occupancy 를 1 감소, 0 미만으로는 내려가지 않음
- 존재하지 않는 방이면 NotFound

"""

def release(db: Session, room_id: uuid.UUID) -> Room:
    db.execute(
        update(Room)
        .where(Room.id == room_id, Room.occupancy > 0)
        .values(occupancy=Room.occupancy - 1)
        .execution_options(synchronize_session=False)
    )
    room = db.scalar(select(Room).where(Room.id == room_id).execution_options(populate_existing=True))
    if not room:
        raise NotFound("Room not found", field="room_id")
    logger.info("room slot released", extra={"room_id": room.id})
    return room


def create_room(
    db: Session,
    *,
    room_number: str,
    block: str,
    floor: int,
    capacity: int = 1,
    yearly_rent: int | None = None,
) -> Room:
    block = normalize_block(block)
    room_number = room_number.strip()

    if find_room(db, block=block, room_number=room_number):
        raise Conflict("Room already exists in this block", field="room_number")

    room = Room(
        room_number=room_number,
        block=block,
        floor=floor,
        capacity=capacity,
        occupancy=0,
        yearly_rent=yearly_rent if yearly_rent is not None else settings.DEFAULT_YEARLY_RENT,
        is_active=True,
    )
    db.add(room)
    db.flush()
    return room


def list_rooms(
    db: Session,
    *,
    block: str | None = None,
    floor: int | None = None,
    is_active: bool | None = None,
) -> list[Room]:
    stmt = select(Room)
    if block:
        stmt = stmt.where(Room.block == normalize_block(block))
    if floor is not None:
        stmt = stmt.where(Room.floor == floor)
    if is_active is not None:
        stmt = stmt.where(Room.is_active.is_(is_active))
    return list(db.scalars(stmt.order_by(Room.block, Room.room_number)).all())


def count_occupants(db: Session, room_id: uuid.UUID) -> int:
    return db.scalar(select(func.count()).select_from(Student).where(Student.room_id == room_id)) or 0


"""
방 정보 수정

- capacity 는 현재 occupancy 보다 작게 줄일 수 없음
- block / room_number 변경 시 (block, room_number) 고유성 재검사 후
  거주 학생들의 비정규화 값을 같은 트랜잭션에서 갱신

"""

def update_room(db: Session, room: Room, changes: dict) -> Room:
    if not changes:
        raise ValidationError("No changes provided")

    new_block = normalize_block(changes["block"]) if changes.get("block") else room.block
    new_number = changes["room_number"].strip() if changes.get("room_number") else room.room_number
    relocated = (new_block, new_number) != (room.block, room.room_number)

    if relocated:
        clash = find_room(db, block=new_block, room_number=new_number)
        if clash and clash.id != room.id:
            raise Conflict("Room already exists in this block", field="room_number")

    # capacity 도 occupancy 와 비교하는 조건부 UPDATE 로만 변경
    if changes.get("capacity") is not None:
        result = db.execute(
            update(Room)
            .where(Room.id == room.id, Room.occupancy <= changes["capacity"])
            .values(capacity=changes["capacity"])
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ValidationError("Capacity cannot be lower than current occupancy", field="capacity")
        db.refresh(room)

    for field in ("floor", "yearly_rent", "is_active"):
        if changes.get(field) is not None:
            setattr(room, field, changes[field])

    if relocated:
        room.block = new_block
        room.room_number = new_number
        db.execute(
            update(Student)
            .where(Student.room_id == room.id)
            .values(block=new_block, room_number=new_number)
            .execution_options(synchronize_session="fetch")
        )

    db.flush()
    return room


def delete_room(db: Session, room: Room) -> None:
    if room.occupancy > 0 or count_occupants(db, room.id) > 0:
        raise Conflict("Room has occupants and cannot be deleted")
    db.delete(room)
