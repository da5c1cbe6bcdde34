# travelhub/core/config.py

import os
from datetime import timedelta


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명에 사용되는 비밀 키. 운영 환경에서는 반드시 .env 로 주입해야 합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'change-me')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '1')))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_REFRESH_TOKEN_DAYS', '14')))

    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'travelhub')
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv('MONGO_SERVER_SELECTION_TIMEOUT_MS', '5000'))

    # 피드 구성 정책
    # 'deprioritize': 관심 없음 태그가 달린 게시물을 뒤로 보냄 / 'exclude': 아예 제외
    FEED_NOT_INTERESTED_POLICY = os.getenv('FEED_NOT_INTERESTED_POLICY', 'deprioritize')
    FEED_BOOST_INTERESTED = _env_bool('FEED_BOOST_INTERESTED', True)
    TRENDING_CANDIDATE_LIMIT = int(os.getenv('TRENDING_CANDIDATE_LIMIT', '500'))

    DEFAULT_PAGE_LIMIT = 25
    MAX_PAGE_LIMIT = 100


class DevelopmentConfig(Config):
    """개발 환경 설정. 디버그 모드에서는 500 응답에 원본 오류 메시지가 포함됩니다."""
    DEBUG = True


class TestingConfig(Config):
    """테스트 환경 설정. 테스트에서는 mongomock 데이터베이스가 create_app 에 주입됩니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'testing-secret-key-that-is-long-enough-for-hs256'
    MONGO_DB_NAME = 'travelhub_test'


class ProductionConfig(Config):
    DEBUG = False


# FLASK_ENV 값에 따라 create_app 에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
