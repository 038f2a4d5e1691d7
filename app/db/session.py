"""
session.py

데이터베이스 엔진 및 세션(Session) 관리 파일.

이 파일은 SQLAlchemy Engine과 SessionLocal을 생성하여
애플리케이션 전반에서 공통으로 사용하는 DB 연결을 관리하고,
여러 테이블에 걸친 쓰기를 하나로 묶는 unit_of_work 경계를 제공한다.

FastAPI 의존성(get_db)을 통해
요청 단위로 세션을 생성/종료하는 구조를 지원한다.

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- 세션 생성/종료 책임을 명확히 분리
- pool_pre_ping=True로 유휴 연결 오류 방지
- 다중 쓰기는 unit_of_work 안에서만 수행 (성공 시 commit, 어떤 예외든 rollback)

관련 파일:
- app.core.config        : DATABASE_URL 설정
- app.core.deps          : get_db 의존성
- app.services.enrollment: 입사 트랜잭션

"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.exceptions import InternalError

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    # SQLite(로컬/테스트)는 threadpool에서 같은 커넥션을 쓸 수 있도록 허용
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


# SQLAlchemy Engine 생성
# pool_pre_ping=True:
#   장시간 idle 후 끊어진 DB 커넥션을 자동으로 감지/재연결
engine = build_engine(settings.DATABASE_URL)

# 요청 단위로 사용할 세션 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class UnitOfWork:
    """unit_of_work() 가 넘겨주는 핸들.

    checkpoint() 는 단계 사이마다 호출하여 제한 시간이 지났으면
    InternalError 를 발생시킨다 (바깥 with 블록이 rollback 처리).
    """

    def __init__(self, db: Session, timeout: float | None):
        self.db = db
        self.timeout = timeout
        self.deadline = None if timeout is None else time.monotonic() + timeout

    def checkpoint(self) -> None:
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise InternalError("Transaction timed out")


@contextmanager
def unit_of_work(db: Session, *, timeout: float | None = None) -> Iterator[UnitOfWork]:
    """여러 쓰기를 하나의 트랜잭션으로 묶는다.

    - 블록이 정상 종료되면 제한 시간을 한 번 더 확인한 뒤 commit
    - 블록 안에서 어떤 예외가 나든 rollback 후 그대로 다시 발생
    - PostgreSQL 에서는 SET LOCAL statement_timeout 으로 DB 쪽 제한도 건다
    """
    uow = UnitOfWork(db, timeout)
    if timeout is not None and db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"SET LOCAL statement_timeout = {int(timeout * 1000)}"))
    try:
        yield uow
        uow.checkpoint()
        db.commit()
    except Exception:
        db.rollback()
        logger.info("transaction rolled back")
        raise
