# travelhub/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from bson import ObjectId

from travelhub.utils.datetime_utils import DateTimeUtils


@dataclass
class Reply:
    """댓글 아래에 달리는 답글. 답글에는 다시 답글을 달 수 없습니다."""
    user_id: ObjectId
    content: str
    _id: ObjectId = field(default_factory=ObjectId)
    likes: List[ObjectId] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)


@dataclass
class Comment:
    """Post 문서의 comments 배열에 내장되는 댓글."""
    user_id: ObjectId
    content: str
    _id: ObjectId = field(default_factory=ObjectId)
    likes: List[ObjectId] = field(default_factory=list)
    replies: List[dict] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)


@dataclass
class Post:
    """
    MongoDB 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    like_count / comment_count 는 정렬을 위해 비정규화하여 저장합니다.
    """
    author_id: ObjectId
    content: str
    images: List[str] = field(default_factory=list)
    location: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    group_id: Optional[str] = None
    likes: List[ObjectId] = field(default_factory=list)
    like_count: int = 0
    comments: List[dict] = field(default_factory=list)
    comment_count: int = 0
    shares: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """태그를 소문자/공백 제거 후 입력 순서를 유지하며 중복 제거합니다."""
    normalized = []
    for tag in tags or []:
        value = str(tag).strip().lower()
        if value and value not in normalized:
            normalized.append(value)
    return normalized
