# travelhub/api/trips/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from travelhub.core.security import get_current_actor
from travelhub.utils.pagination import clamp_limit
from travelhub.utils.responses import api_response

from .schemas import (
    TripCreateSchema,
    TripListQuerySchema,
    TripResponseSchema,
    TripSearchQuerySchema,
    TripStatusSchema,
)

trips_bp = Blueprint('trips_bp', __name__)


@trips_bp.route('', methods=['GET'])
@jwt_required()
def get_trips():
    """로그인한 사용자의 여행 목록을 최신순으로 조회합니다. (status, page, limit 필터)"""
    trip_service = current_app.services['trips']
    params = TripListQuerySchema().load(request.args)
    params['limit'] = clamp_limit(params['limit'])
    trips, pagination = trip_service.get_trips(get_current_actor(), **params)
    return api_response({
        "trips": TripResponseSchema(many=True).dump(trips),
        "pagination": pagination,
    })


@trips_bp.route('/search', methods=['GET'])
@jwt_required()
def search_trips():
    trip_service = current_app.services['trips']
    params = TripSearchQuerySchema().load(request.args)
    trips = trip_service.search_trips(get_current_actor(), params['q'])
    return api_response(TripResponseSchema(many=True).dump(trips), count=len(trips))


@trips_bp.route('/<string:trip_id>', methods=['GET'])
@jwt_required()
def get_trip(trip_id: str):
    """[소유자 전용] 단일 여행 조회. 없으면 404, 타인의 여행이면 403."""
    trip_service = current_app.services['trips']
    trip = trip_service.get_trip(get_current_actor(), trip_id)
    return api_response(TripResponseSchema().dump(trip))


@trips_bp.route('', methods=['POST'])
@jwt_required()
def create_trip():
    """
    새 여행을 생성합니다.
    - name, startLocation, destination 필수 / 경유지는 최대 5개
    - 성공 시 201 과 함께 status='draft', isPlanned=false 인 여행을 반환합니다.
    """
    trip_service = current_app.services['trips']
    data = TripCreateSchema().load(request.get_json(silent=True) or {})
    new_trip = trip_service.create_trip(get_current_actor(), data)
    return api_response(TripResponseSchema().dump(new_trip), message="여행이 저장되었습니다.", status=201)


@trips_bp.route('/<string:trip_id>', methods=['PUT'])
@jwt_required()
def update_trip(trip_id: str):
    """[소유자 전용] 전달된 필드만 수정합니다."""
    trip_service = current_app.services['trips']
    data = TripCreateSchema().load(request.get_json(silent=True) or {}, partial=True)
    updated_trip = trip_service.update_trip(get_current_actor(), trip_id, data)
    return api_response(TripResponseSchema().dump(updated_trip), message="여행이 수정되었습니다.")


@trips_bp.route('/<string:trip_id>', methods=['DELETE'])
@jwt_required()
def delete_trip(trip_id: str):
    trip_service = current_app.services['trips']
    trip_service.delete_trip(get_current_actor(), trip_id)
    return api_response(message="여행이 삭제되었습니다.")


@trips_bp.route('/<string:trip_id>/duplicate', methods=['POST'])
@jwt_required()
def duplicate_trip(trip_id: str):
    """[소유자 전용] 여행을 복제합니다. 복제본은 초안(draft) 상태로 시작합니다."""
    trip_service = current_app.services['trips']
    copied_trip = trip_service.duplicate_trip(get_current_actor(), trip_id)
    return api_response(TripResponseSchema().dump(copied_trip), message="여행이 복제되었습니다.", status=201)


@trips_bp.route('/<string:trip_id>/status', methods=['PATCH'])
@jwt_required()
def update_trip_status(trip_id: str):
    trip_service = current_app.services['trips']
    data = TripStatusSchema().load(request.get_json(silent=True) or {})
    updated_trip = trip_service.set_trip_status(get_current_actor(), trip_id, data['status'])
    return api_response(TripResponseSchema().dump(updated_trip),
                        message=f"여행 상태가 '{data['status']}'(으)로 변경되었습니다.")
