# travelhub/api/auth/routes.py

import logging

import jwt
from flask import Blueprint, current_app, request
from flask_jwt_extended import create_access_token, create_refresh_token, get_jwt_identity, jwt_required

from travelhub.core.security import get_current_actor
from travelhub.utils.responses import api_response, error_response

from .schemas import LoginSchema, LogoutRequestSchema, RegisterSchema, UserResponseSchema

auth_bp = Blueprint('auth_bp', __name__)


def _issue_tokens(user: dict) -> dict:
    identity = str(user['_id'])
    return {
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
        "user": UserResponseSchema().dump(user),
    }


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호로 회원가입하고 토큰을 발급합니다."""
    auth_service = current_app.services['auth']
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    user = auth_service.register_user(**data)
    return api_response(_issue_tokens(user), message="회원가입이 완료되었습니다.", status=201)


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.services['auth']
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user = auth_service.authenticate(data['email'], data['password'])
    if not user:
        return error_response("INVALID_CREDENTIALS", "이메일 또는 비밀번호가 올바르지 않습니다.", 401)
    return api_response(_issue_tokens(user))


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """유효한 Refresh Token 으로 새로운 Access Token 을 발급합니다."""
    new_access_token = create_access_token(identity=get_jwt_identity())
    return api_response({"access_token": new_access_token})


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    data = LogoutRequestSchema().load(request.get_json(silent=True) or {})

    # 만료된 토큰도 무효화할 수 있도록 만료 검사는 생략합니다.
    secret_key = current_app.config['JWT_SECRET_KEY']
    algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')
    try:
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm],
                                    options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm],
                                     options={"verify_exp": False})
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return error_response("INVALID_TOKEN", "유효하지 않은 토큰입니다.", 422)

    claims = [decoded.get(name) for decoded in (decoded_access, decoded_refresh) for name in ('jti', 'exp')]
    if any(claim is None for claim in claims):
        logging.warning("로그아웃 토큰에 jti 또는 exp 클레임이 없습니다.")
        return error_response("INVALID_TOKEN", "유효하지 않은 토큰입니다.", 422)

    auth_service.logout_user(*claims)
    return api_response(message="로그아웃 되었습니다.")


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    user_service = current_app.services['users']
    user = user_service.get_user(get_current_actor().user_id)
    return api_response(UserResponseSchema().dump(user))
