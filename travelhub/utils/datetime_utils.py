# travelhub/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간 처리를 위한 유틸리티.

백엔드는 UTC 로 통일합니다. MongoDB 드라이버는 기본적으로 timezone 정보가 없는(naive)
datetime 을 돌려주므로, 비교/계산 전에는 반드시 ensure_utc 로 정규화합니다.
"""
from datetime import datetime, timezone
from typing import Optional


class DateTimeUtils:

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime 으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
        """naive datetime 은 UTC 로 간주하고, aware datetime 은 UTC 로 변환"""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def hours_since(dt: datetime, now: Optional[datetime] = None) -> float:
        now = DateTimeUtils.ensure_utc(now) if now else DateTimeUtils.now()
        delta = now - DateTimeUtils.ensure_utc(dt)
        return max(delta.total_seconds() / 3600, 0.0)
