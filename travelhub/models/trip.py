# travelhub/models/trip.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from bson import ObjectId

from travelhub.utils.datetime_utils import DateTimeUtils

MAX_STOPS = 5
TRAVEL_MODES = ('car', 'flight')
TRIP_STATUSES = ('draft', 'planned', 'completed', 'cancelled')
MAP_LOCATION_TYPES = ('start', 'stop', 'end')

# 복제 시 그대로 복사되는 경로 관련 필드
ROUTE_FIELDS = (
    'start_location', 'destination', 'stops', 'travel_mode',
    'estimated_time', 'estimated_distance', 'map_locations',
)


@dataclass
class Trip:
    """
    MongoDB 'trips' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    stops: [{'id', 'location', 'coordinates': {'lat', 'lng'}}]
    map_locations: [{'name', 'coordinates': [lat, lng], 'type'}]
    """
    user_id: ObjectId
    name: str
    start_location: str
    destination: str
    stops: List[Dict[str, Any]] = field(default_factory=list)
    travel_mode: str = 'car'
    estimated_time: str = ''
    estimated_distance: str = ''
    is_planned: bool = False
    map_locations: List[Dict[str, Any]] = field(default_factory=list)
    status: str = 'draft'
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
