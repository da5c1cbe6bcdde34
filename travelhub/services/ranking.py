# travelhub/services/ranking.py
"""
트렌딩 피드 정렬을 위한 hot score 계산.

Formula: Score = (L + C + S) / (T + 2)^1.5

- L = 좋아요 수
- C = 댓글 수
- S = 공유 수
- T = 게시 후 경과 시간(시간 단위)
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from travelhub.utils.datetime_utils import DateTimeUtils

GRAVITY = 1.5


def calculate_hot_score(post: Dict[str, Any], now: Optional[datetime] = None) -> float:
    engagement = (
        int(post.get('like_count') or 0)
        + int(post.get('comment_count') or 0)
        + int(post.get('shares') or 0)
    )
    created_at = post.get('created_at')
    hours = DateTimeUtils.hours_since(created_at, now) if created_at else 0.0
    return round(engagement / (hours + 2) ** GRAVITY, 6)


def sort_by_hot_score(posts: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """점수가 같으면 최신 게시물이 앞에 옵니다. (입력은 최신순이라고 가정, 안정 정렬)"""
    now = now or DateTimeUtils.now()
    return sorted(posts, key=lambda post: calculate_hot_score(post, now), reverse=True)
