# travelhub/api/trips/services.py
import logging
import re
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from marshmallow import ValidationError
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from travelhub.core.database import to_object_id
from travelhub.core.exceptions import ResourceNotFoundError
from travelhub.core.permissions import Actor, ensure_can_edit
from travelhub.models.trip import MAX_STOPS, ROUTE_FIELDS, TRIP_STATUSES, Trip
from travelhub.utils.datetime_utils import DateTimeUtils
from travelhub.utils.pagination import page_bounds, page_summary

logger = logging.getLogger(__name__)

_NEWEST_FIRST = [('created_at', DESCENDING), ('_id', DESCENDING)]


def _check_stop_limit(data: Dict[str, Any]) -> None:
    """스키마를 거치지 않은 호출에서도 경유지 개수 제한을 보장합니다."""
    if len(data.get('stops') or []) > MAX_STOPS:
        raise ValidationError({'stops': [f"경유지는 최대 {MAX_STOPS}개까지 추가할 수 있습니다."]})


class TripService:
    """
    여행 경로(Trip) 관련 비즈니스 로직을 담당하는 서비스 클래스.
    Trip 은 한 명의 사용자에게만 속하며, 조회/수정/삭제 모두 소유자 본인만 가능합니다.
    입력값 검증은 라우트의 TripCreateSchema 에서 끝난 상태로 전달됩니다.
    """
    def __init__(self, db: Database):
        self.db = db
        self.trips_ref = db.trips

    def create_trip(self, owner: Actor, data: Dict[str, Any]) -> Dict[str, Any]:
        """새로운 여행 경로를 생성합니다. 생략된 필드는 Trip 데이터클래스의 기본값을 따릅니다."""
        _check_stop_limit(data)
        new_trip = Trip(user_id=to_object_id(owner.user_id), **data)
        doc = asdict(new_trip)
        result = self.trips_ref.insert_one(doc)
        doc['_id'] = result.inserted_id
        logger.info(f"Trip 생성 완료 (trip_id: {doc['_id']}, user_id: {owner.user_id})")
        return doc

    def get_trips(self, owner: Actor, status: Optional[str] = None,
                  page: int = 1, limit: int = 50) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """소유자의 여행 목록을 최신순으로 조회합니다. 허용되지 않은 status 필터는 무시됩니다."""
        query: Dict[str, Any] = {'user_id': to_object_id(owner.user_id)}
        if status in TRIP_STATUSES:
            query['status'] = status

        total = self.trips_ref.count_documents(query)
        cursor = self.trips_ref.find(query).sort(_NEWEST_FIRST).skip(page_bounds(page, limit)).limit(limit)
        return list(cursor), page_summary(page, limit, total)

    def get_trip(self, owner: Actor, trip_id: str) -> Dict[str, Any]:
        """
        단일 여행을 조회합니다.
        존재하지 않으면 ResourceNotFoundError, 다른 사용자의 여행이면 ForbiddenError 를 발생시킵니다.
        소유자 조건 없이 문서를 찾은 뒤 소유권을 따로 검사합니다.
        """
        object_id = to_object_id(trip_id)
        trip = self.trips_ref.find_one({'_id': object_id}) if object_id else None
        if not trip:
            raise ResourceNotFoundError("여행을 찾을 수 없습니다.")
        ensure_can_edit(owner, trip.get('user_id'), "이 여행에 접근할 권한이 없습니다.")
        return trip

    def update_trip(self, owner: Actor, trip_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """전달된 필드만 덮어씁니다."""
        trip = self.get_trip(owner, trip_id)
        if not data:
            return trip
        _check_stop_limit(data)
        update_data = dict(data, updated_at=DateTimeUtils.now())
        return self.trips_ref.find_one_and_update(
            {'_id': trip['_id']}, {'$set': update_data}, return_document=ReturnDocument.AFTER
        )

    def delete_trip(self, owner: Actor, trip_id: str) -> None:
        trip = self.get_trip(owner, trip_id)
        self.trips_ref.delete_one({'_id': trip['_id']})
        logger.info(f"Trip 삭제 완료 (trip_id: {trip_id}, user_id: {owner.user_id})")

    def duplicate_trip(self, owner: Actor, trip_id: str) -> Dict[str, Any]:
        """경로 데이터를 복사한 새 여행을 만듭니다. 계획 여부와 상태는 초기화됩니다."""
        original = self.get_trip(owner, trip_id)
        copied = {key: original[key] for key in ROUTE_FIELDS if key in original}
        copied.update(name=f"{original['name']} (Copy)", is_planned=False, status='draft')
        return self.create_trip(owner, copied)

    def set_trip_status(self, owner: Actor, trip_id: str, status: str) -> Dict[str, Any]:
        if status not in TRIP_STATUSES:
            raise ValidationError({'status': [f"유효하지 않은 상태입니다: {status}"]})
        return self.update_trip(owner, trip_id, {'status': status})

    def search_trips(self, owner: Actor, text: str, limit: int = 50) -> List[Dict[str, Any]]:
        """이름, 출발지, 목적지에 대해 대소문자 구분 없이 부분 일치 검색합니다."""
        text = (text or '').strip()
        if not text:
            return []
        pattern = {'$regex': re.escape(text), '$options': 'i'}
        query = {
            'user_id': to_object_id(owner.user_id),
            '$or': [{'name': pattern}, {'start_location': pattern}, {'destination': pattern}],
        }
        return list(self.trips_ref.find(query).sort(_NEWEST_FIRST).limit(limit))
