# travelhub/api/trips/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate

from travelhub.models.trip import MAP_LOCATION_TYPES, MAX_STOPS, TRAVEL_MODES, TRIP_STATUSES
from travelhub.utils.fields import ObjectIdField, TrimmedString

TRIP_PAGE_LIMIT = 50

_REQUIRED = {"required": "필수 항목입니다.", "null": "필수 항목입니다."}


# --- 중첩 스키마 ---
class CoordinatesSchema(Schema):
    lat = fields.Float(required=True)
    lng = fields.Float(required=True)


class StopSchema(Schema):
    """경유지. id 는 클라이언트가 부여합니다."""
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True, validate=validate.Length(min=1))
    location = TrimmedString(required=True, validate=validate.Length(min=1))
    coordinates = fields.Nested(CoordinatesSchema, allow_none=True)


class MapLocationSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str()
    coordinates = fields.List(fields.Float(), validate=validate.Length(equal=2, error="좌표는 [lat, lng] 형식이어야 합니다."))
    type = fields.Str(validate=validate.OneOf(MAP_LOCATION_TYPES))


# --- API 요청 스키마 ---
class TripCreateSchema(Schema):
    """
    POST /api/trips 요청 본문의 유효성을 검사합니다.
    PUT /api/trips/{id} 에서는 partial=True 로 로드하여 전달된 필드만 검사합니다.
    모든 필드 오류를 한 번에 모아 반환합니다.
    """
    class Meta:
        unknown = EXCLUDE

    name = TrimmedString(required=True, error_messages=_REQUIRED,
                         validate=validate.Length(min=1, max=200, error="1~200자 사이여야 합니다."))
    start_location = TrimmedString(data_key='startLocation', required=True, error_messages=_REQUIRED,
                                   validate=validate.Length(min=1, max=200, error="1~200자 사이여야 합니다."))
    destination = TrimmedString(required=True, error_messages=_REQUIRED,
                                validate=validate.Length(min=1, max=200, error="1~200자 사이여야 합니다."))
    stops = fields.List(fields.Nested(StopSchema),
                        validate=validate.Length(max=MAX_STOPS, error=f"경유지는 최대 {MAX_STOPS}개까지 추가할 수 있습니다."))
    travel_mode = fields.Str(data_key='travelMode', validate=validate.OneOf(TRAVEL_MODES))
    estimated_time = fields.Str(data_key='estimatedTime')
    estimated_distance = fields.Str(data_key='estimatedDistance')
    is_planned = fields.Bool(data_key='isPlanned')
    map_locations = fields.List(fields.Nested(MapLocationSchema), data_key='mapLocations')
    status = fields.Str(validate=validate.OneOf(TRIP_STATUSES))


class TripStatusSchema(Schema):
    """PATCH /api/trips/{id}/status"""
    status = fields.Str(required=True, error_messages=_REQUIRED,
                        validate=validate.OneOf(TRIP_STATUSES, error="유효하지 않은 상태입니다."))


class TripListQuerySchema(Schema):
    """GET /api/trips 쿼리 파라미터. 허용되지 않은 status 값은 서비스에서 무시합니다."""
    class Meta:
        unknown = EXCLUDE

    status = fields.Str()
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=TRIP_PAGE_LIMIT, validate=validate.Range(min=1))


class TripSearchQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    q = fields.Str(load_default='')


# --- API 응답 스키마 ---
class TripResponseSchema(Schema):
    id = ObjectIdField(attribute='_id', data_key='_id', dump_only=True)
    user_id = ObjectIdField(data_key='userId')
    name = fields.Str()
    start_location = fields.Str(data_key='startLocation')
    destination = fields.Str()
    stops = fields.List(fields.Nested(StopSchema))
    travel_mode = fields.Str(data_key='travelMode')
    estimated_time = fields.Str(data_key='estimatedTime')
    estimated_distance = fields.Str(data_key='estimatedDistance')
    is_planned = fields.Bool(data_key='isPlanned')
    map_locations = fields.List(fields.Nested(MapLocationSchema), data_key='mapLocations')
    status = fields.Str()
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')
