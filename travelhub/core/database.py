# travelhub/core/database.py

import logging
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from flask import Flask, current_app
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)


def init_db(app: Flask, db: Optional[Database] = None) -> Database:
    """
    MongoDB 데이터베이스 핸들을 생성(또는 주입받아)하여 app.extensions 에 저장합니다.
    테스트에서는 mongomock 데이터베이스를 db 인자로 전달합니다.
    """
    if db is None:
        client = MongoClient(
            app.config['MONGO_URI'],
            serverSelectionTimeoutMS=app.config['MONGO_SERVER_SELECTION_TIMEOUT_MS']
        )
        db = client[app.config['MONGO_DB_NAME']]

    ensure_indexes(db)
    app.extensions['mongo_db'] = db
    logger.info(f"MongoDB 초기화 완료 (database: {db.name})")
    return db


def ensure_indexes(db: Database) -> None:
    db.trips.create_index([('user_id', ASCENDING), ('created_at', DESCENDING)])
    db.trips.create_index([('user_id', ASCENDING), ('status', ASCENDING)])
    db.posts.create_index([('is_active', ASCENDING), ('created_at', DESCENDING)])
    db.posts.create_index([('tags', ASCENDING)])
    db.posts.create_index([('author_id', ASCENDING)])
    db.users.create_index([('email', ASCENDING)], unique=True)
    db.revoked_tokens.create_index([('jti', ASCENDING)], unique=True)


def get_db() -> Database:
    return current_app.extensions['mongo_db']


def to_object_id(value: Any) -> Optional[ObjectId]:
    """문자열 ID 를 ObjectId 로 변환합니다. 형식이 잘못된 경우 None 을 반환합니다."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None
