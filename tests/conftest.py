# tests/conftest.py
"""
공용 pytest 픽스처.

- app: TestingConfig + mongomock 데이터베이스로 만든 Flask 앱 (테스트마다 새로 생성)
- client: Flask 테스트 클라이언트
- make_user: 사용자를 만들고 Authorization 헤더를 함께 돌려주는 팩토리
"""
from dataclasses import dataclass
from typing import Dict

import mongomock
import pytest
from flask_jwt_extended import create_access_token, create_refresh_token

from travelhub import create_app
from travelhub.core.permissions import ROLE_ADMIN, Actor


@dataclass
class AuthedUser:
    id: str
    email: str
    headers: Dict[str, str]
    access_token: str
    refresh_token: str

    @property
    def actor(self) -> Actor:
        return Actor(user_id=self.id)


@pytest.fixture
def db():
    return mongomock.MongoClient()['travelhub_test']


@pytest.fixture
def app(db):
    app = create_app('testing', db=db)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app, db):
    counter = {'n': 0}

    def _make_user(first_name: str = 'Test', role: str = 'user') -> AuthedUser:
        counter['n'] += 1
        email = f"{first_name.lower()}{counter['n']}@example.com"
        user = app.services['auth'].register_user(first_name, 'User', email, 'password123')
        if role != 'user':
            db.users.update_one({'_id': user['_id']}, {'$set': {'role': role}})

        user_id = str(user['_id'])
        with app.app_context():
            access_token = create_access_token(identity=user_id)
            refresh_token = create_refresh_token(identity=user_id)
        return AuthedUser(
            id=user_id,
            email=email,
            headers={'Authorization': f'Bearer {access_token}'},
            access_token=access_token,
            refresh_token=refresh_token,
        )

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user('Alice')


@pytest.fixture
def bob(make_user):
    return make_user('Bob')


@pytest.fixture
def admin(make_user):
    return make_user('Admin', role=ROLE_ADMIN)
