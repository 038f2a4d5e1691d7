"""
logging_config.py

애플리케이션 로깅 설정 파일.

- development : 사람이 읽기 쉬운 한 줄 텍스트 로그
- production  : 로그 수집기(CloudWatch 등)가 파싱하기 쉬운 JSON 로그

각 모듈은 logging.getLogger(__name__) 으로 로거를 얻어 사용하고,
핸들러/포맷터 구성은 앱 시작 시 setup_logging() 한 번만 수행한다.

"""

import json
import logging
import sys
from datetime import datetime, timezone

from app.core.config import settings


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # logger.info("...", extra={"room_id": ...}) 로 넘긴 값도 함께 기록
        for key in ("user_id", "student_id", "room_id", "block", "room_number"):
            value = getattr(record, key, None)
            if value is not None:
                data[key] = str(value)
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def setup_logging() -> None:
    root = logging.getLogger()
    if getattr(root, "_hostel_configured", False):
        return

    handler = logging.StreamHandler(sys.stdout)
    if settings.is_development:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    else:
        handler.setFormatter(JSONFormatter())

    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())

    # SQL 로그는 너무 많아서 WARNING 이상만
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    root._hostel_configured = True
