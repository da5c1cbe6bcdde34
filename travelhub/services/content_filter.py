# travelhub/services/content_filter.py
"""
사용자 콘텐츠 선호도(관심/관심 없음 태그, 신고한 게시물)를 피드에 반영하는 순수 함수 모음.

관심 없음 태그 처리 정책
- 'deprioritize': 관심 없음 태그가 있는 게시물을 목록 뒤로 보냅니다. (기본값)
- 'exclude': 관심 없음 태그가 있는 게시물을 목록에서 제거합니다.
두 정책 모두 각 그룹 내부의 기존 정렬 순서는 유지합니다.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

POLICY_DEPRIORITIZE = 'deprioritize'
POLICY_EXCLUDE = 'exclude'
POLICIES = (POLICY_DEPRIORITIZE, POLICY_EXCLUDE)


@dataclass
class FeedPreferences:
    interested_tags: Set[str] = field(default_factory=set)
    not_interested_tags: Set[str] = field(default_factory=set)
    reported_post_ids: Set[str] = field(default_factory=set)

    @classmethod
    def from_user(cls, user: Optional[Dict[str, Any]]) -> 'FeedPreferences':
        """users 문서의 content_preferences 에서 필터 입력을 만듭니다."""
        prefs = (user or {}).get('content_preferences') or {}
        return cls(
            interested_tags=set(prefs.get('interested_tags') or []),
            not_interested_tags=set(prefs.get('not_interested_tags') or []),
            reported_post_ids={str(r.get('post_id')) for r in prefs.get('reported_posts') or []},
        )

    @property
    def is_empty(self) -> bool:
        return not (self.interested_tags or self.not_interested_tags or self.reported_post_ids)


def _tags_of(post: Dict[str, Any]) -> Set[str]:
    return {str(tag).lower() for tag in post.get('tags') or []}


def apply_content_preferences(posts: Iterable[Dict[str, Any]], preferences: FeedPreferences,
                              policy: str = POLICY_DEPRIORITIZE,
                              boost_interested: bool = True) -> List[Dict[str, Any]]:
    """
    게시물 목록에 선호도를 적용한 새 목록을 반환합니다. 입력 목록은 변경하지 않습니다.

    :param posts: 이미 정렬된 게시물 목록
    :param preferences: 사용자의 선호도
    :param policy: 'deprioritize' 또는 'exclude'
    :param boost_interested: True 이면 관심 태그가 있는 게시물을 앞으로 올립니다.
    """
    if policy not in POLICIES:
        raise ValueError(f"알 수 없는 피드 정책입니다: {policy}")

    boosted, neutral, sunk = [], [], []
    for post in posts:
        if str(post.get('_id')) in preferences.reported_post_ids:
            continue
        tags = _tags_of(post)
        if tags & preferences.not_interested_tags:
            if policy == POLICY_EXCLUDE:
                continue
            sunk.append(post)
        elif boost_interested and tags & preferences.interested_tags:
            boosted.append(post)
        else:
            neutral.append(post)
    return boosted + neutral + sunk
