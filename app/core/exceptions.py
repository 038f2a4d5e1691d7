"""
exceptions.py

기숙사 관리 도메인 전용 예외(Exception) 정의 파일.

서비스 계층은 HTTP를 모르는 상태에서 이 예외들을 발생시키고,
app.main 에 등록된 예외 핸들러가 이를
{"success": false, "message": ...} 형태의 응답으로 변환한다.

예외 분류:
- ValidationError  : 입력값 누락/형식 오류 (400)
- Unauthenticated  : 토큰 없음/만료/위조 (401)
- Forbidden        : 권한 부족, 비활성 계정 (403)
- NotFound         : 참조 대상 없음 (404)
- Conflict         : 이메일/전화번호/학번 중복 등 고유성 위반 (409)
- RoomFullError    : 방 정원 초과 (409, Conflict 하위 타입)
- InternalError    : DB/트랜잭션 장애 (500)

관련 파일:
- app.main               : 예외 → JSON 응답 변환 핸들러
- app.services.*         : 예외 발생 지점

"""

from typing import Any, Dict, Optional


class HostelError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "code": self.code,
            "message": self.message,
        }
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(HostelError):
    status_code = 400
    code = "VALIDATION_ERROR"


class Unauthenticated(HostelError):
    status_code = 401
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(message)


class Forbidden(HostelError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFound(HostelError):
    status_code = 404
    code = "NOT_FOUND"


class Conflict(HostelError):
    status_code = 409
    code = "CONFLICT"


class RoomFullError(Conflict):
    code = "ROOM_FULL"

    def __init__(self, block: str, room_number: str):
        super().__init__(f"Room {room_number} in block {block} is full", field="room_number")
        self.block = block
        self.room_number = room_number


class InternalError(HostelError):
    status_code = 500
    code = "INTERNAL_ERROR"
