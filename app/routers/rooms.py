"""
rooms.py

방(Room) 관리 API 모음.

- 생성 / 수정 / 사용 여부 전환 / 삭제 : ADMIN 전용
- 목록 / 상세 조회 : 로그인한 모든 사용자

occupancy 는 이 API 로 직접 수정할 수 없고,
입사(enrollment) / 학생 삭제 / 방 이동 흐름에서만 변경된다.

관련 파일:
- app.services.rooms       : 방 관련 비즈니스 로직

"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_admin, get_current_user, get_db
from app.db.session import unit_of_work
from app.models.user import User
from app.schemas.room import RoomCreate, RoomDetailResponse, RoomResponse, RoomUpdate
from app.services import rooms as room_service

router = APIRouter(prefix="/rooms", tags=["rooms"])


def _room(room) -> dict:
    return RoomResponse.model_validate(room).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    with unit_of_work(db):
        room = room_service.create_room(
            db,
            room_number=data.room_number,
            block=data.block,
            floor=data.floor,
            capacity=data.capacity,
            yearly_rent=data.yearly_rent,
        )
    db.refresh(room)
    return {"success": True, "message": "Room created", "data": _room(room)}


@router.get("")
def list_rooms(
    block: str | None = None,
    floor: int | None = None,
    is_active: bool | None = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    rooms = room_service.list_rooms(db, block=block, floor=floor, is_active=is_active)
    return {
        "success": True,
        "message": "Rooms fetched successfully",
        "count": len(rooms),
        "data": [_room(r) for r in rooms],
    }


@router.get("/{room_id}")
def get_room(
    room_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    room = room_service.get_room(db, room_id)
    return {
        "success": True,
        "message": "Room fetched successfully",
        "data": RoomDetailResponse.model_validate(room).model_dump(mode="json"),
    }


@router.patch("/{room_id}")
def update_room(
    room_id: uuid.UUID,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    with unit_of_work(db):
        room = room_service.get_room(db, room_id)
        room = room_service.update_room(db, room, data.model_dump(exclude_unset=True))
    db.refresh(room)
    return {"success": True, "message": "Room updated", "data": _room(room)}


@router.patch("/{room_id}/toggle")
def toggle_room_status(
    room_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    with unit_of_work(db):
        room = room_service.get_room(db, room_id)
        room.is_active = not room.is_active
    db.refresh(room)
    return {
        "success": True,
        "message": f"Room is now {'active' if room.is_active else 'inactive'}",
        "data": _room(room),
    }


@router.delete("/{room_id}")
def delete_room(
    room_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    with unit_of_work(db):
        room = room_service.get_room(db, room_id)
        room_service.delete_room(db, room)
    return {"success": True, "message": "Room deleted successfully"}
