# travelhub/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List

from bson import ObjectId

from travelhub.core.permissions import ROLE_USER
from travelhub.utils.datetime_utils import DateTimeUtils


@dataclass
class ContentPreferences:
    """
    interested_tags 와 not_interested_tags 는 서로 배타적입니다.
    reported_posts: [{'post_id', 'reason', 'reported_at'}] (사용자-게시물 쌍당 최대 1건)
    """
    interested_tags: List[str] = field(default_factory=list)
    not_interested_tags: List[str] = field(default_factory=list)
    reported_posts: List[Dict] = field(default_factory=list)


@dataclass
class User:
    """MongoDB 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스."""
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: str = ROLE_USER
    bio: str = ''
    profile_image: str = ''
    saved_posts: List[ObjectId] = field(default_factory=list)
    content_preferences: ContentPreferences = field(default_factory=ContentPreferences)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
