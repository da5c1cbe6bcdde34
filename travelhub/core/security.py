# travelhub/core/security.py
"""
JWT 설정 및 현재 요청의 행위자(Actor) 해석.

토큰의 identity 는 users 문서의 _id 문자열이며, 요청마다 users 컬렉션에서 role 을 다시 읽어
Actor 로 변환합니다. 따라서 권한 변경은 토큰 재발급 없이 즉시 반영됩니다.
"""
from typing import Optional

from flask import current_app
from flask_jwt_extended import JWTManager, get_current_user, get_jwt_identity

from travelhub.core.database import get_db, to_object_id
from travelhub.core.permissions import Actor, ROLE_USER
from travelhub.utils.responses import error_response

jwt = JWTManager()


@jwt.user_lookup_loader
def load_actor(jwt_header: dict, jwt_data: dict) -> Optional[Actor]:
    user_id = to_object_id(jwt_data.get('sub'))
    if user_id is None:
        return None
    user = get_db().users.find_one({'_id': user_id}, {'role': 1})
    if not user:
        return None
    return Actor(user_id=str(user['_id']), role=user.get('role', ROLE_USER))


@jwt.token_in_blocklist_loader
def is_token_revoked(jwt_header: dict, jwt_payload: dict) -> bool:
    return current_app.services['auth'].is_token_revoked(jwt_payload)


@jwt.unauthorized_loader
def handle_missing_token(reason: str):
    return error_response("UNAUTHORIZED", "인증이 필요합니다.", 401, details=reason)


@jwt.invalid_token_loader
def handle_invalid_token(reason: str):
    return error_response("INVALID_TOKEN", "유효하지 않은 토큰입니다.", 401, details=reason)


@jwt.expired_token_loader
def handle_expired_token(jwt_header: dict, jwt_payload: dict):
    return error_response("TOKEN_EXPIRED", "토큰이 만료되었습니다.", 401)


@jwt.revoked_token_loader
def handle_revoked_token(jwt_header: dict, jwt_payload: dict):
    return error_response("TOKEN_REVOKED", "로그아웃된 토큰입니다.", 401)


@jwt.user_lookup_error_loader
def handle_unknown_user(jwt_header: dict, jwt_payload: dict):
    return error_response("USER_NOT_FOUND", "토큰의 사용자를 찾을 수 없습니다.", 401)


def get_current_actor() -> Optional[Actor]:
    """
    jwt_required(optional=True) 라우트에서는 토큰이 없으면 None 을 반환합니다.
    jwt_required() 라우트에서는 항상 Actor 를 반환합니다.
    """
    if get_jwt_identity() is None:
        return None
    return get_current_user()
