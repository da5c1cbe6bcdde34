# travelhub/client/__init__.py
"""
TravelHub API 를 사용하는 클라이언트 측 구성 요소.
HTTP 클라이언트, 서버와 동기화되는 상태 저장소, 로컬 전용 저장소로 구성됩니다.
"""

from .api import ApiError, TravelHubClient
from .local_store import (
    ActivityBookingStore,
    FavoritesStore,
    InMemoryStorage,
    JsonFileStorage,
    NotificationStore,
    StorageBackend,
)
from .sync import Notifier, PostSyncStore, TripSyncStore

__all__ = [
    'ApiError', 'TravelHubClient',
    'StorageBackend', 'InMemoryStorage', 'JsonFileStorage',
    'FavoritesStore', 'ActivityBookingStore', 'NotificationStore',
    'Notifier', 'TripSyncStore', 'PostSyncStore',
]
