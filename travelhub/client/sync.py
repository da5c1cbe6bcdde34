# travelhub/client/sync.py
"""
클라이언트 측 상태 저장소.

서버 응답을 기다리지 않고 로컬 상태를 먼저 바꾸는(optimistic) 방식으로 동작하며,
서버 응답이 오면 서버 값으로 교체하고 실패하면 이전 상태로 되돌립니다.
사용자에게 보여줄 성공/실패 메시지는 주입된 notifier 로 전달합니다.
"""
import copy
import logging
import uuid
from typing import Any, Dict, List, Optional

from travelhub.client.api import ApiError, TravelHubClient

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = 'temp-'


class Notifier:
    """사용자 알림(토스트 등) 인터페이스. 기본 구현은 아무것도 하지 않습니다."""

    def success(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


def _index_of(items: List[Dict[str, Any]], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.get('_id') == item_id:
            return index
    return -1


class TripSyncStore:
    """로그인한 사용자의 여행 목록과 현재 편집 중인 여행을 관리합니다."""

    def __init__(self, api: TravelHubClient, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.trips: List[Dict[str, Any]] = []
        self.current_trip: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        # 자동 저장 상태: 마지막으로 자동 저장된 여행 ID 와 그때의 입력값
        self._auto_saved_id: Optional[str] = None
        self._auto_saved_snapshot: Optional[Dict[str, Any]] = None

    # --- 내부 헬퍼 ---
    def _fail(self, error: ApiError, fallback: str, notify: bool = True) -> None:
        self.error = error.message or fallback
        logger.error(f"{fallback}: {self.error}")
        if notify and not error.is_unauthorized:
            self.notifier.error(self.error)

    def _replace(self, trip_id: str, trip: Dict[str, Any]) -> None:
        index = _index_of(self.trips, trip_id)
        if index >= 0:
            self.trips[index] = trip
        if self.current_trip and self.current_trip.get('_id') == trip_id:
            self.current_trip = trip

    # --- 조회 ---
    def fetch_trips(self, **filters) -> List[Dict[str, Any]]:
        if not self.api.is_authenticated:
            self.trips = []
            return self.trips
        self.error = None
        try:
            self.trips = self.api.get_trips(**filters)['trips']
        except ApiError as e:
            self._fail(e, "Failed to fetch trips")
        return self.trips

    def fetch_trip(self, trip_id: str) -> Optional[Dict[str, Any]]:
        self.error = None
        try:
            self.current_trip = self.api.get_trip(trip_id)
        except ApiError as e:
            self._fail(e, "Failed to fetch trip", notify=False)
            return None
        return self.current_trip

    def search_trips(self, query: str) -> List[Dict[str, Any]]:
        """빈 검색어는 현재 목록을 그대로 반환합니다."""
        if not query or not query.strip():
            return list(self.trips)
        try:
            return self.api.search_trips(query.strip())
        except ApiError as e:
            logger.error(f"Error searching trips: {e.message}")
            return []

    # --- 변경 ---
    def create_trip(self, trip_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not self.api.is_authenticated:
            self.notifier.error("Please sign in to save trips")
            return None
        self.error = None

        temp_id = f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"
        placeholder = dict(trip_data, _id=temp_id, status='draft', isPlanned=False)
        self.trips.insert(0, placeholder)
        try:
            new_trip = self.api.create_trip(trip_data)
        except ApiError as e:
            self.trips = [trip for trip in self.trips if trip.get('_id') != temp_id]
            self._fail(e, "Failed to create trip")
            return None

        self._replace(temp_id, new_trip)
        self.current_trip = new_trip
        self.notifier.success("Trip saved successfully!")
        return new_trip

    def update_trip(self, trip_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._patch(trip_id, changes, lambda: self.api.update_trip(trip_id, changes),
                           "Trip updated successfully!", "Failed to update trip")

    def update_trip_status(self, trip_id: str, status: str) -> Optional[Dict[str, Any]]:
        return self._patch(trip_id, {'status': status}, lambda: self.api.update_trip_status(trip_id, status),
                           f"Trip status updated to {status}!", "Failed to update trip status")

    def _patch(self, trip_id, changes, send, success_message, failure_message):
        """로컬 상태에 변경을 먼저 반영하고, 서버 응답으로 교체하거나 실패 시 되돌립니다."""
        self.error = None
        index = _index_of(self.trips, trip_id)
        previous = copy.deepcopy(self.trips[index]) if index >= 0 else None
        previous_current = copy.deepcopy(self.current_trip)

        if previous is not None:
            self.trips[index] = dict(previous, **changes)
        if self.current_trip and self.current_trip.get('_id') == trip_id:
            self.current_trip = dict(self.current_trip, **changes)

        try:
            updated = send()
        except ApiError as e:
            current_index = _index_of(self.trips, trip_id)
            if previous is not None and current_index >= 0:
                self.trips[current_index] = previous
            self.current_trip = previous_current
            self._fail(e, failure_message)
            return None

        self._replace(trip_id, updated)
        self.notifier.success(success_message)
        return updated

    def delete_trip(self, trip_id: str) -> bool:
        self.error = None
        index = _index_of(self.trips, trip_id)
        removed = self.trips.pop(index) if index >= 0 else None
        previous_current = self.current_trip
        if self.current_trip and self.current_trip.get('_id') == trip_id:
            self.current_trip = None

        try:
            self.api.delete_trip(trip_id)
        except ApiError as e:
            if removed is not None:
                self.trips.insert(min(index, len(self.trips)), removed)
            self.current_trip = previous_current
            self._fail(e, "Failed to delete trip")
            return False

        if self._auto_saved_id == trip_id:
            self._reset_auto_save()
        self.notifier.success("Trip deleted successfully!")
        return True

    def duplicate_trip(self, trip_id: str) -> Optional[Dict[str, Any]]:
        self.error = None
        try:
            copied = self.api.duplicate_trip(trip_id)
        except ApiError as e:
            self._fail(e, "Failed to duplicate trip")
            return None
        self.trips.insert(0, copied)
        self.notifier.success("Trip duplicated successfully!")
        return copied

    # --- 자동 저장 ---
    def auto_save_trip(self, trip_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        편집 중인 여행을 조용히 저장합니다. 실패해도 알림을 띄우지 않고 로그만 남깁니다.
        - 서버 ID 를 알면(_id 또는 직전 자동 저장 결과) 수정, 모르면 생성합니다.
        - 직전 자동 저장 이후 입력값이 바뀌지 않았다면 요청을 보내지 않습니다.
        """
        if not self.api.is_authenticated:
            return None

        payload = {key: value for key, value in trip_data.items() if key != '_id'}
        trip_id = trip_data.get('_id') or self._auto_saved_id
        if (trip_id and trip_id == self._auto_saved_id
                and payload == self._auto_saved_snapshot):
            return self.current_trip

        try:
            if trip_id:
                saved = self.api.update_trip(trip_id, payload)
            else:
                saved = self.api.create_trip(payload)
        except ApiError as e:
            logger.error(f"Error auto-saving trip: {e.message}")
            return None

        if _index_of(self.trips, saved['_id']) >= 0:
            self._replace(saved['_id'], saved)
        else:
            self.trips.insert(0, saved)
        self.current_trip = saved
        self._auto_saved_id = saved['_id']
        self._auto_saved_snapshot = copy.deepcopy(payload)
        return saved

    def _reset_auto_save(self) -> None:
        self._auto_saved_id = None
        self._auto_saved_snapshot = None

    # --- 초기화 ---
    def clear_current_trip(self) -> None:
        self.current_trip = None
        self._reset_auto_save()

    def clear_all_data(self) -> None:
        """로그아웃 시 호출합니다."""
        self.trips = []
        self.current_trip = None
        self.error = None
        self._reset_auto_save()


class PostSyncStore:
    """커뮤니티 피드 상태. 좋아요/저장은 즉시 화면에 반영하고 서버 응답으로 맞춥니다."""

    def __init__(self, api: TravelHubClient, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.posts: List[Dict[str, Any]] = []
        self.total = 0
        self.pagination: Dict[str, Any] = {}
        self.error: Optional[str] = None

    def _find(self, post_id: str) -> Optional[Dict[str, Any]]:
        index = _index_of(self.posts, post_id)
        return self.posts[index] if index >= 0 else None

    def _fail(self, error: ApiError, fallback: str) -> None:
        self.error = error.message or fallback
        logger.error(f"{fallback}: {self.error}")
        if not error.is_unauthorized:
            self.notifier.error(self.error)

    def fetch_posts(self, **filters) -> List[Dict[str, Any]]:
        self.error = None
        try:
            body = self.api.get_posts(**filters)
        except ApiError as e:
            self._fail(e, "Failed to load posts")
            return self.posts
        self.posts = body.get('data') or []
        self.total = body.get('total', len(self.posts))
        self.pagination = body.get('pagination') or {}
        return self.posts

    def create_post(self, post_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            new_post = self.api.create_post(post_data)
        except ApiError as e:
            self._fail(e, "Failed to create post")
            return None
        self.posts.insert(0, new_post)
        self.total += 1
        self.notifier.success("Post created successfully!")
        return new_post

    def delete_post(self, post_id: str) -> bool:
        index = _index_of(self.posts, post_id)
        removed = self.posts.pop(index) if index >= 0 else None
        try:
            self.api.delete_post(post_id)
        except ApiError as e:
            if removed is not None:
                self.posts.insert(min(index, len(self.posts)), removed)
            self._fail(e, "Failed to delete post")
            return False
        self.total = max(self.total - 1, 0)
        self.notifier.success("Post deleted")
        return True

    # --- 좋아요 ---
    def _send_like(self, post_id: str, send) -> Optional[bool]:
        """
        좋아요 상태를 즉시 바꾸고 likeCount 를 조정한 뒤 서버 응답(likeCount, isLiked)으로 맞춥니다.
        :return: 최종 isLiked, 실패하면 None
        """
        post = self._find(post_id)
        previous = (post.get('isLiked', False), post.get('likeCount', 0)) if post else None
        if post is not None:
            post['isLiked'] = not previous[0]
            post['likeCount'] = max(previous[1] + (1 if post['isLiked'] else -1), 0)

        try:
            state = send()
        except ApiError as e:
            if post is not None:
                post['isLiked'], post['likeCount'] = previous
            self._fail(e, "Failed to update like")
            return None

        if post is not None:
            post['isLiked'] = state['isLiked']
            post['likeCount'] = state['likeCount']
        return state['isLiked']

    def toggle_like(self, post_id: str) -> Optional[bool]:
        return self._send_like(post_id, lambda: self.api.toggle_like(post_id))

    def like(self, post_id: str) -> Optional[bool]:
        """
        좋아요만 하고 취소는 하지 않습니다. 이미 좋아요한 게시글이면 요청을 보내지 않으며,
        목록에 없는 게시글도 서버에 좋아요 상태 지정(PUT)을 요청하므로 기존 좋아요가 취소되지 않습니다.
        """
        post = self._find(post_id)
        if post is not None and post.get('isLiked'):
            return True
        return self._send_like(post_id, lambda: self.api.like_post(post_id))

    # --- 저장 ---
    def toggle_save(self, post_id: str) -> Optional[bool]:
        post = self._find(post_id)
        previous = post.get('isSaved', False) if post else None
        if post is not None:
            post['isSaved'] = not previous

        try:
            state = self.api.toggle_save(post_id)
        except ApiError as e:
            if post is not None:
                post['isSaved'] = previous
            self._fail(e, "Failed to save post")
            return None

        if post is not None:
            post['isSaved'] = state['isSaved']
        self.notifier.success("Post saved" if state['isSaved'] else "Post removed from saved")
        return state['isSaved']

    # --- 댓글 ---
    def add_comment(self, post_id: str, content: str) -> Optional[Dict[str, Any]]:
        if not content or not content.strip():
            return None
        try:
            comment = self.api.add_comment(post_id, content.strip())
        except ApiError as e:
            self._fail(e, "Failed to add comment")
            return None

        post = self._find(post_id)
        if post is not None:
            post.setdefault('comments', []).append(comment)
            post['commentCount'] = post.get('commentCount', 0) + 1
        return comment
