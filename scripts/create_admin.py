"""

ADMIN 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- .env에 정의된 ADMIN_* 환경 변수를 읽어
  ADMIN 계정을 생성한다.
- 이미 ADMIN 계정이 존재하면 생성하지 않고 종료한다.

사용 목적:
- 입사 처리 / 사용자 관리 API에 접근할 수 있는
  첫 관리자 계정을 안전하게 초기화하기 위함

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_admin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import or_, select
from app.db.session import SessionLocal
from app.models.user import User, Role
from app.services import users as user_service


def main():
    db = SessionLocal()
    try:
        exists = db.scalar(
            select(User).where(User.role == Role.ADMIN)
        )
        if exists:
            print("✅ ADMIN already exists. Skip creation.")
            return

        values = {
            "full_name": os.environ.get("ADMIN_NAME", "Hostel Admin"),
            "email": os.environ["ADMIN_EMAIL"],
            "phone": os.environ.get("ADMIN_PHONE", "0000000000"),
            "password": os.environ["ADMIN_PASSWORD"],
            "role": Role.ADMIN.value,
        }
        user_service.validate_user_fields(values)

        taken = db.scalar(
            select(User).where(
                or_(User.email == values["email"].strip().lower(), User.phone == values["phone"].strip())
            )
        )
        if taken:
            raise RuntimeError("Email or phone already exists but is not ADMIN")

        user = user_service.create_user(
            db,
            full_name=values["full_name"],
            email=values["email"],
            phone=values["phone"],
            password=values["password"],
            role=Role.ADMIN,
        )
        db.commit()

        print(f"🚀 ADMIN created: {user.email}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
