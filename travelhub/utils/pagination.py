# travelhub/utils/pagination.py
import math
from typing import Any, Dict, Optional

from flask import current_app


def page_bounds(page: int, limit: int) -> int:
    """1부터 시작하는 page 를 skip 값으로 변환합니다."""
    return (page - 1) * limit


def page_summary(page: int, limit: int, total: int) -> Dict[str, Any]:
    """Trip 목록에서 사용하는 {page, limit, total, pages} 형식."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def page_links(page: int, limit: int, total: int) -> Dict[str, Any]:
    """피드 목록에서 사용하는 {next?, prev?} 형식."""
    pagination = {}
    if page * limit < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if page > 1:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return pagination


def clamp_limit(limit: Optional[int]) -> int:
    """limit 이 없으면 DEFAULT_PAGE_LIMIT 를 쓰고, MAX_PAGE_LIMIT 를 넘지 않도록 자릅니다."""
    config = current_app.config
    return min(limit or config['DEFAULT_PAGE_LIMIT'], config['MAX_PAGE_LIMIT'])
