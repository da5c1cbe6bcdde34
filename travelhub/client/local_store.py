# travelhub/client/local_store.py
"""
서버와 동기화하지 않는 로컬 전용 저장소 (즐겨찾기, 액티비티 예약, 알림).

각 저장소는 StorageBackend 를 주입받아 생성되는 일반 객체이며, 모듈 수준의 싱글톤을 두지 않습니다.
저장소 간 연동(예: 예약 시 알림 추가)은 on_event 콜백으로 연결합니다.
"""
import copy
import json
import logging
import os
import tempfile
import uuid
from typing import Any, Callable, Dict, List, Optional

from travelhub.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

EventListener = Callable[[str, Dict[str, Any]], None]

MAX_NOTIFICATIONS = 50


# =====================================================================================
# Storage backends
# =====================================================================================
class StorageBackend:
    """키-값 저장소 인터페이스. 값은 JSON 으로 직렬화 가능한 객체여야 합니다."""

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStorage(StorageBackend):

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(StorageBackend):
    """
    모든 키를 하나의 JSON 파일에 저장합니다.
    파일이 손상되어 읽을 수 없으면 빈 저장소로 간주합니다.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read local storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            os.remove(tmp_path)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


def _timestamp() -> str:
    return DateTimeUtils.now().isoformat()


def _local_id(prefix: str) -> str:
    return f"{prefix}_{int(DateTimeUtils.now().timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


# =====================================================================================
# Favorites
# =====================================================================================
class FavoritesStore:
    STORAGE_KEY = 'travel_favorites'

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    def list(self) -> List[Dict[str, Any]]:
        return self.storage.get(self.STORAGE_KEY, [])

    def is_favorite(self, item_id: str) -> bool:
        return any(fav['id'] == item_id for fav in self.list())

    def add(self, item_id: str, title: str, url: str = '') -> Dict[str, Any]:
        favorites = self.list()
        for fav in favorites:
            if fav['id'] == item_id:
                return fav
        favorite = {'id': item_id, 'title': title, 'url': url, 'addedAt': _timestamp()}
        favorites.append(favorite)
        self.storage.set(self.STORAGE_KEY, favorites)
        return favorite

    def remove(self, item_id: str) -> bool:
        favorites = self.list()
        remaining = [fav for fav in favorites if fav['id'] != item_id]
        if len(remaining) == len(favorites):
            return False
        self.storage.set(self.STORAGE_KEY, remaining)
        return True

    def toggle(self, item_id: str, title: str, url: str = '') -> bool:
        """즐겨찾기 여부를 뒤집고, 토글 후 즐겨찾기 상태를 반환합니다."""
        if self.is_favorite(item_id):
            self.remove(item_id)
            return False
        self.add(item_id, title, url)
        return True


# =====================================================================================
# Activity bookings
# =====================================================================================
class ActivityBookingStore:
    STORAGE_KEY = 'booked_activities'

    def __init__(self, storage: StorageBackend, on_event: Optional[EventListener] = None):
        self.storage = storage
        self.on_event = on_event

    def _all(self) -> List[Dict[str, Any]]:
        return self.storage.get(self.STORAGE_KEY, [])

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        if self.on_event:
            self.on_event(event, payload)

    def book(self, activity: Dict[str, Any]) -> Dict[str, Any]:
        """activity: {'id', 'name', 'image', 'price', 'duration', 'destination'}"""
        booking = {
            'id': _local_id('booking'),
            'activityId': activity['id'],
            'activityName': activity.get('name', ''),
            'activityImage': activity.get('image', ''),
            'price': activity.get('price', 0),
            'duration': activity.get('duration', ''),
            'destination': activity.get('destination', ''),
            'bookedAt': _timestamp(),
            'status': 'booked',
        }
        bookings = self._all()
        bookings.append(booking)
        self.storage.set(self.STORAGE_KEY, bookings)
        self._emit('activity:booked', booking)
        return booking

    def get_booked_activities(self) -> List[Dict[str, Any]]:
        return [booking for booking in self._all() if booking['status'] == 'booked']

    def is_activity_booked(self, activity_id: str) -> bool:
        return any(booking['activityId'] == activity_id for booking in self.get_booked_activities())

    def get_booking(self, booking_id: str) -> Optional[Dict[str, Any]]:
        return next((booking for booking in self._all() if booking['id'] == booking_id), None)

    def cancel_booking(self, booking_id: str) -> bool:
        bookings = self._all()
        for booking in bookings:
            if booking['id'] == booking_id:
                booking['status'] = 'cancelled'
                self.storage.set(self.STORAGE_KEY, bookings)
                self._emit('activity:cancelled', booking)
                return True
        return False

    def total_booked(self) -> int:
        return len(self.get_booked_activities())

    def total_spent(self) -> float:
        return sum(booking['price'] for booking in self.get_booked_activities())

    def clear_all(self) -> None:
        self.storage.set(self.STORAGE_KEY, [])
        self._emit('activity:cleared', {})


# =====================================================================================
# Notifications
# =====================================================================================
class NotificationStore:
    """최근 MAX_NOTIFICATIONS 개의 알림을 최신순으로 보관합니다."""
    STORAGE_KEY = 'user_notifications'

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    def list(self) -> List[Dict[str, Any]]:
        notifications = self.storage.get(self.STORAGE_KEY, [])
        return sorted(notifications, key=lambda n: n['timestamp'], reverse=True)

    def unread_count(self) -> int:
        return sum(1 for n in self.list() if not n['read'])

    def add(self, type: str, title: str, message: str, variant: str = 'default',
            icon: str = 'Bell', action_url: Optional[str] = None) -> Dict[str, Any]:
        notification = {
            'id': _local_id(type),
            'type': type,
            'title': title,
            'message': message,
            'timestamp': _timestamp(),
            'read': False,
            'icon': icon,
            'variant': variant,
        }
        if action_url:
            notification['actionUrl'] = action_url

        notifications = self.storage.get(self.STORAGE_KEY, [])
        notifications.insert(0, notification)
        self.storage.set(self.STORAGE_KEY, notifications[:MAX_NOTIFICATIONS])
        return notification

    def mark_as_read(self, notification_id: str) -> bool:
        notifications = self.storage.get(self.STORAGE_KEY, [])
        for notification in notifications:
            if notification['id'] == notification_id and not notification['read']:
                notification['read'] = True
                self.storage.set(self.STORAGE_KEY, notifications)
                return True
        return False

    def mark_all_as_read(self) -> None:
        notifications = self.storage.get(self.STORAGE_KEY, [])
        for notification in notifications:
            notification['read'] = True
        self.storage.set(self.STORAGE_KEY, notifications)

    def remove(self, notification_id: str) -> bool:
        notifications = self.storage.get(self.STORAGE_KEY, [])
        remaining = [n for n in notifications if n['id'] != notification_id]
        if len(remaining) == len(notifications):
            return False
        self.storage.set(self.STORAGE_KEY, remaining)
        return True

    def clear(self) -> None:
        self.storage.remove(self.STORAGE_KEY)

    def handle_event(self, event: str, payload: Dict[str, Any]) -> None:
        """ActivityBookingStore 의 on_event 로 연결하면 예약 시 알림이 추가됩니다."""
        if event == 'activity:booked':
            self.add(
                'booking', 'Activity Booked',
                f"You've successfully booked \"{payload['activityName']}\" in {payload['destination']}",
                variant='success', icon='Activity', action_url='/profile?tab=activities',
            )
