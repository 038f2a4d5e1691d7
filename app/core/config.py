"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

이 파일은 .env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
애플리케이션 전반에서 공통으로 사용하는 설정 값을 제공한다.

주요 설정 항목:
- 데이터베이스 연결 정보
- JWT 인증 관련 시크릿 및 만료 정책
- CORS 허용 도메인 목록
- 실행 환경(development / production) 및 로그 레벨
- 방 배정 기본값(기본 정원, 연간 기숙사비)
- 입사(enrollment) 트랜잭션 제한 시간

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 로컬 / 테스트 / 운영 환경을 .env로 분리하여 관리
- 설정 값은 런타임 중 변경되지 않는 불변 객체로 취급

관련 파일:
- app.main               : CORS / 로깅 초기화 시 설정 사용
- app.core.security      : JWT 시크릿 / 만료 설정 사용
- app.db.session         : DATABASE_URL 사용
- app.services.rooms     : DEFAULT_ROOM_CAPACITY 사용
- app.services.enrollment: ENROLLMENT_TIMEOUT_SECONDS 사용

"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

# .env 파일에 정의된 환경 변수를 로드하는 설정 클래스
# extra="ignore" 옵션으로 정의되지 않은 환경 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str
    TEST_DATABASE_URL: str | None = None

    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # refresh token 없이 access token 하나만 24시간 사용
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    API_V1_PREFIX: str = "/api/v1"

    # development 에서만 500 응답에 예외 내용을 노출
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # 존재하지 않는 방으로 입사할 때 자동 생성되는 방의 정원
    DEFAULT_ROOM_CAPACITY: int = 2
    DEFAULT_YEARLY_RENT: int = 85000

    ENROLLMENT_TIMEOUT_SECONDS: float = 10.0

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

# 애플리케이션 전역에서 import하여 사용하는 Settings 인스턴스
# 실행 시 한 번만 생성됨
settings = Settings()
