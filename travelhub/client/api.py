# travelhub/client/api.py
"""
TravelHub REST API 클라이언트.

- 모든 요청은 하나의 requests.Session 을 공유하며 timeout(기본 10초)을 가집니다.
- 성공 응답의 {success, data, ...} 봉투를 벗겨 data 를 반환합니다.
- 실패 응답, 타임아웃, 연결 오류는 모두 ApiError 로 변환됩니다. (타임아웃/연결 오류는 status=None)
- 401 응답을 받으면 저장된 토큰을 지우고 on_unauthorized 콜백을 호출합니다.
"""
import logging
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, message: str, status: Optional[int] = None,
                 error_code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.error_code = error_code
        self.details = details

    @property
    def is_network_error(self) -> bool:
        return self.status is None

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401


class TravelHubClient:
    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None,
                 on_unauthorized: Optional[Callable[[], None]] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        self.on_unauthorized = on_unauthorized

    # --- 토큰 관리 ---
    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = None

    # --- 공통 요청 처리 ---
    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                json: Any = None) -> Dict[str, Any]:
        """요청을 보내고 응답 본문(봉투 전체)을 반환합니다."""
        headers = {}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = self.session.request(
                method, f"{self.base_url}{path}",
                params=params, json=json, headers=headers, timeout=self.timeout
            )
        except requests.Timeout:
            raise ApiError("요청 시간이 초과되었습니다.")
        except requests.RequestException as e:
            raise ApiError(f"서버에 연결할 수 없습니다: {e}")

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 401:
            self.clear_token()
            if self.on_unauthorized:
                self.on_unauthorized()

        if not response.ok or body.get('success') is False:
            raise ApiError(
                body.get('message') or f"요청이 실패했습니다. (HTTP {response.status_code})",
                status=response.status_code,
                error_code=body.get('error_code'),
                details=body.get('details'),
            )
        return body

    def _data(self, method: str, path: str, **kwargs) -> Any:
        return self.request(method, path, **kwargs).get('data')

    # --- 인증 ---
    def register(self, first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._data('POST', '/auth/register', json={
            'firstName': first_name, 'lastName': last_name, 'email': email, 'password': password,
        })
        self.set_token(data['access_token'])
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._data('POST', '/auth/login', json={'email': email, 'password': password})
        self.set_token(data['access_token'])
        return data

    def logout(self, refresh_token: str) -> None:
        if self.token:
            self.request('POST', '/auth/logout',
                         json={'access_token': self.token, 'refresh_token': refresh_token})
        self.clear_token()

    # --- Trips ---
    def get_trips(self, status: Optional[str] = None, page: Optional[int] = None,
                  limit: Optional[int] = None) -> Dict[str, Any]:
        return self._data('GET', '/trips', params={'status': status, 'page': page, 'limit': limit})

    def get_trip(self, trip_id: str) -> Dict[str, Any]:
        return self._data('GET', f'/trips/{trip_id}')

    def create_trip(self, trip: Dict[str, Any]) -> Dict[str, Any]:
        return self._data('POST', '/trips', json=trip)

    def update_trip(self, trip_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._data('PUT', f'/trips/{trip_id}', json=changes)

    def delete_trip(self, trip_id: str) -> None:
        self.request('DELETE', f'/trips/{trip_id}')

    def duplicate_trip(self, trip_id: str) -> Dict[str, Any]:
        return self._data('POST', f'/trips/{trip_id}/duplicate')

    def update_trip_status(self, trip_id: str, status: str) -> Dict[str, Any]:
        return self._data('PATCH', f'/trips/{trip_id}/status', json={'status': status})

    def search_trips(self, query: str) -> list:
        return self._data('GET', '/trips/search', params={'q': query}) or []

    # --- Posts ---
    def get_posts(self, **filters) -> Dict[str, Any]:
        """피드 조회. data 외에 total, pagination 도 필요하므로 봉투 전체를 반환합니다."""
        return self.request('GET', '/posts', params=filters)

    def create_post(self, post: Dict[str, Any]) -> Dict[str, Any]:
        return self._data('POST', '/posts', json=post)

    def delete_post(self, post_id: str) -> None:
        self.request('DELETE', f'/posts/{post_id}')

    def toggle_like(self, post_id: str) -> Dict[str, Any]:
        return self._data('POST', f'/posts/{post_id}/like')

    def like_post(self, post_id: str) -> Dict[str, Any]:
        """이미 좋아요한 게시글이어도 취소되지 않는 좋아요 요청."""
        return self._data('PUT', f'/posts/{post_id}/like')

    def unlike(self, post_id: str) -> Dict[str, Any]:
        return self._data('DELETE', f'/posts/{post_id}/like')

    def toggle_save(self, post_id: str) -> Dict[str, Any]:
        return self._data('POST', f'/posts/{post_id}/save')

    def add_comment(self, post_id: str, content: str) -> Dict[str, Any]:
        return self._data('POST', f'/posts/{post_id}/comment', json={'content': content})

    def report_post(self, post_id: str, reason: str) -> None:
        self.request('POST', f'/posts/{post_id}/report', json={'reason': reason})

    # --- Users ---
    def get_preferences(self) -> Dict[str, Any]:
        return self._data('GET', '/users/preferences')

    def update_preferences(self, interested_tags=None, not_interested_tags=None) -> Dict[str, Any]:
        payload = {}
        if interested_tags is not None:
            payload['interestedTags'] = list(interested_tags)
        if not_interested_tags is not None:
            payload['notInterestedTags'] = list(not_interested_tags)
        return self._data('PUT', '/users/preferences', json=payload)
