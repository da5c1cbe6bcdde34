# travelhub/api/users/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from travelhub.api.posts.schemas import PageQuerySchema, PostResponseSchema
from travelhub.core.security import get_current_actor
from travelhub.utils.pagination import clamp_limit
from travelhub.utils.responses import api_response

from .schemas import MyCommentSchema, PreferencesResponseSchema, PreferencesUpdateSchema

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/preferences', methods=['GET'])
@jwt_required()
def get_preferences():
    user_service = current_app.services['users']
    preferences = user_service.get_preferences(get_current_actor())
    return api_response(PreferencesResponseSchema().dump(preferences))


@users_bp.route('/preferences', methods=['PUT'])
@jwt_required()
def update_preferences():
    """
    관심/관심 없음 태그 목록을 교체합니다.
    두 목록에 같은 태그가 들어오면 관심 없음 쪽에만 남습니다.
    """
    user_service = current_app.services['users']
    data = PreferencesUpdateSchema().load(request.get_json(silent=True) or {})
    preferences = user_service.update_preferences(get_current_actor(), **data)
    return api_response(PreferencesResponseSchema().dump(preferences), message="선호도가 저장되었습니다.")


@users_bp.route('/saved-posts', methods=['GET'])
@jwt_required()
def get_saved_posts():
    user_service = current_app.services['users']
    params = PageQuerySchema().load(request.args)
    params['limit'] = clamp_limit(params.get('limit'))
    posts, total = user_service.get_saved_posts(get_current_actor(), **params)
    return api_response(PostResponseSchema(many=True).dump(posts), count=len(posts), total=total)


@users_bp.route('/my-comments', methods=['GET'])
@jwt_required()
def get_my_comments():
    """활성 게시글에 내가 남긴 댓글과 답글을 최신순으로 반환합니다."""
    user_service = current_app.services['users']
    items = user_service.get_my_comments(get_current_actor())
    return api_response(MyCommentSchema(many=True).dump(items), count=len(items))
