# travelhub/api/auth/services.py
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from travelhub.core.exceptions import ConflictError
from travelhub.models.user import User
from travelhub.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class AuthService:
    """회원가입/로그인과 로그아웃 토큰 무효화 목록(blocklist)을 관리합니다."""
    def __init__(self, db: Database):
        self.db = db
        self.users_ref = db.users
        self.revoked_tokens_ref = db.revoked_tokens

    def register_user(self, first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
        email = email.strip().lower()
        if self.users_ref.find_one({'email': email}, {'_id': 1}):
            raise ConflictError("이미 가입된 이메일입니다.")

        new_user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
        )
        doc = asdict(new_user)
        try:
            result = self.users_ref.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("이미 가입된 이메일입니다.")
        doc['_id'] = result.inserted_id
        logger.info(f"회원가입 완료 (user_id: {doc['_id']})")
        return doc

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        user = self.users_ref.find_one({'email': email.strip().lower()})
        if not user or not check_password_hash(user.get('password_hash', ''), password):
            return None
        return user

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime) -> None:
        """전달받은 토큰의 jti 를 만료 시간과 함께 저장합니다. 이미 등록된 jti 는 무시합니다."""
        self.revoked_tokens_ref.update_one(
            {'jti': jti},
            {'$setOnInsert': {'jti': jti, 'revoked_at': DateTimeUtils.now(), 'expires_at': expires}},
            upsert=True
        )

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        jti = jwt_payload.get('jti')
        return bool(jti) and self.revoked_tokens_ref.find_one({'jti': jti}, {'_id': 1}) is not None

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int) -> None:
        """Access 토큰과 Refresh 토큰을 모두 Blocklist 에 추가합니다."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logger.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")
