# travelhub/utils/__init__.py
"""
유틸리티 모듈 패키지

프로젝트 전체에서 공통으로 사용되는 응답 형식, 페이지네이션, 날짜/시간, marshmallow 필드를 포함합니다.
"""

from .datetime_utils import DateTimeUtils
from .pagination import clamp_limit, page_bounds, page_links, page_summary

__all__ = [
    'DateTimeUtils',
    'clamp_limit', 'page_bounds', 'page_links', 'page_summary',
]
