"""
auth.py

인증(Authentication) API 모음.

JWT Access Token 방식을 사용하며, 토큰은 응답 바디로 반환하고
클라이언트는 Authorization: Bearer 헤더로 전달한다.

주요 기능:
- 로그인 및 토큰 발급
- 로그아웃 (token_version 증가로 기존 토큰 무효화)

관련 파일:
- app.core.security        : 비밀번호 검증 / JWT 생성
- app.services.users       : authenticate
- app.core.deps            : 인증 의존성(get_current_user)

"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserResponse
from app.services.users import authenticate

router = APIRouter(tags=["auth"])


"""
로그인 API

- 이메일 / 비밀번호 인증
- 비활성(inactive) 계정은 로그인 불가 (403)
- Access Token 과 사용자 정보를 응답 바디로 반환

"""

@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, email=data.email, password=data.password)

    access = create_access_token(
        subject=str(user.id),
        role=user.role.value,
        token_version=user.token_version,
    )
    return {
        "success": True,
        "message": "User logged in successfully",
        "data": {
            **TokenResponse(access_token=access).model_dump(),
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
        },
    }


"""
로그아웃 API

- token_version 증가로 지금까지 발급된 모든 토큰 무효화

"""

@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user.token_version += 1
    db.commit()
    return {"success": True, "message": "User logged out successfully"}
