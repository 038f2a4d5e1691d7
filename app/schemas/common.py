import math

from pydantic import BaseModel


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def clamp_page(page: int, limit: int) -> tuple[int, int]:
    # 기본 page=1, limit=10, 최대 100건
    return max(1, page), max(1, min(limit, 100))


def page_meta(page: int, limit: int, total: int) -> PageMeta:
    return PageMeta(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)
