"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

이 파일은 서버 실행 시 가장 먼저 로드되며,
애플리케이션 전반의 설정과 라우터 등록을 담당한다.

주요 역할:
- 로깅 초기화 및 FastAPI 앱 인스턴스 생성
- CORS 미들웨어 설정
- 각 도메인별 라우터(auth, users, rooms, students, leave-requests 등) 등록
- 도메인 예외(HostelError) → {"success": false, ...} 응답 변환
- 헬스 체크 및 DB 연결 상태 확인용 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 실제 기능은 routers / services 계층에 위임
- 운영 환경에서는 500 응답에 내부 예외 내용을 노출하지 않음

관련 파일:
- app.core.config        : 환경 변수 및 설정 로드
- app.core.exceptions    : 도메인 예외 정의
- app.core.logging_config: 로깅 설정
- app.routers.*          : 기능별 API 라우터

"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db
from app.core.exceptions import HostelError
from app.core.logging_config import setup_logging
from app.routers import (
    announcements,
    auth,
    disciplinary_cases,
    issue_comments,
    issues,
    leave_requests,
    payments,
    rooms,
    students,
    users,
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Hostel Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (
    auth,
    users,
    rooms,
    students,
    leave_requests,
    disciplinary_cases,
    issues,
    issue_comments,
    payments,
    announcements,
):
    app.include_router(module.router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(HostelError)
async def hostel_error_handler(request: Request, exc: HostelError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# 요청 본문/쿼리 형식 오류는 첫 번째 오류 메시지만 400 으로 반환
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    field = None
    if errors:
        first = errors[0]
        message = first.get("msg", message)
        loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[-1] if loc else None

    body = {"success": False, "code": "VALIDATION_ERROR", "message": message}
    if field:
        body["field"] = field
    return JSONResponse(status_code=400, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    body = {"success": False, "code": "INTERNAL_ERROR", "message": "Internal server error"}
    if settings.is_development:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


"""
서버 헬스 체크 엔드포인트

- 애플리케이션 프로세스가 정상 동작 중인지 확인
- 로드밸런서 / 배포 환경에서 서버 상태 확인 용도

"""
@app.get("/health")
def health():
    return {"status": "ok"}

"""
데이터베이스 연결 상태 확인 엔드포인트

- 간단한 SELECT 1 쿼리를 통해 DB 연결 여부 확인
- 서버는 살아 있으나 DB가 죽은 상황을 분리해서 감지 가능

"""
@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    value = db.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "value": value}
