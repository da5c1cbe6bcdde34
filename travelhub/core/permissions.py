# travelhub/core/permissions.py
"""
소유권/권한 검사.

모든 변경 작업(Trip, Post, Comment, Reply)은 이 모듈의 함수를 통해서만 권한을 확인합니다.
- 수정: 작성자(소유자) 본인만 가능
- 삭제: 작성자 본인 또는 관리자(admin)
"""
from dataclasses import dataclass
from typing import Any, Optional

from travelhub.core.exceptions import ForbiddenError

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'


@dataclass(frozen=True)
class Actor:
    """인증된 요청의 행위자. JWT identity 와 users 문서의 role 로 구성됩니다."""
    user_id: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def owns(actor: Optional[Actor], owner_id: Any) -> bool:
    if actor is None or owner_id is None:
        return False
    return str(actor.user_id) == str(owner_id)


def ensure_can_edit(actor: Optional[Actor], owner_id: Any, message: str = None) -> None:
    # 관리자라도 타인의 콘텐츠를 수정할 수는 없음
    if not owns(actor, owner_id):
        raise ForbiddenError(message or "수정 권한이 없습니다.")


def ensure_can_delete(actor: Optional[Actor], owner_id: Any, message: str = None) -> None:
    if owns(actor, owner_id):
        return
    if actor is not None and actor.is_admin:
        return
    raise ForbiddenError(message or "삭제 권한이 없습니다.")
