# travelhub/api/posts/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from travelhub.api.users.schemas import PreferencesResponseSchema
from travelhub.core.security import get_current_actor
from travelhub.utils.pagination import clamp_limit
from travelhub.utils.responses import api_response

from .schemas import (
    FEED_SORTS,
    LikeStateSchema,
    PageQuerySchema,
    PostCreateSchema,
    PostListQuerySchema,
    PostResponseSchema,
    PostUpdateSchema,
    ReportSchema,
)

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('', methods=['GET'])
@jwt_required(optional=True)
def get_posts():
    """
    커뮤니티 피드 조회. 로그인은 선택 사항입니다.
    로그인한 경우 신고한 게시글은 제외되고 콘텐츠 선호도가 반영됩니다.
    """
    post_service = current_app.services['posts']
    params = PostListQuerySchema().load(request.args)
    if params['sort'] not in FEED_SORTS:
        params['sort'] = 'latest'
    params['limit'] = clamp_limit(params.get('limit'))
    posts, total, pagination = post_service.list_posts(viewer=get_current_actor(), **params)
    return api_response(PostResponseSchema(many=True).dump(posts),
                        count=len(posts), total=total, pagination=pagination)


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    post_service = current_app.services['posts']
    data = PostCreateSchema().load(request.get_json(silent=True) or {})
    new_post = post_service.create_post(get_current_actor(), data)
    return api_response(PostResponseSchema().dump(new_post), message="게시글이 등록되었습니다.", status=201)


@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required(optional=True)
def get_post(post_id: str):
    post_service = current_app.services['posts']
    post = post_service.get_post(post_id, viewer=get_current_actor())
    return api_response(PostResponseSchema().dump(post))


@posts_bp.route('/user/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_user_posts(user_id: str):
    """특정 사용자가 작성한 게시글 목록"""
    post_service = current_app.services['posts']
    params = PageQuerySchema().load(request.args)
    params['limit'] = clamp_limit(params.get('limit'))
    posts, total = post_service.get_user_posts(user_id, viewer=get_current_actor(), **params)
    return api_response(PostResponseSchema(many=True).dump(posts), count=len(posts), total=total)


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    """[작성자 전용] content, location, tags 만 수정할 수 있습니다."""
    post_service = current_app.services['posts']
    data = PostUpdateSchema().load(request.get_json(silent=True) or {})
    updated_post = post_service.update_post(get_current_actor(), post_id, data)
    return api_response(PostResponseSchema().dump(updated_post), message="게시글이 수정되었습니다.")


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """[작성자 또는 관리자] 게시글을 삭제합니다."""
    post_service = current_app.services['posts']
    post_service.delete_post(get_current_actor(), post_id)
    return api_response(message="게시글이 삭제되었습니다.")


# --- 좋아요 / 저장 / 공유 ---
@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_like(post_id: str):
    post_service = current_app.services['posts']
    state = post_service.toggle_like(get_current_actor(), post_id)
    return api_response(LikeStateSchema().dump(state))


@posts_bp.route('/<string:post_id>/like', methods=['PUT'])
@jwt_required()
def like(post_id: str):
    """이미 좋아요한 상태면 아무것도 바꾸지 않습니다."""
    post_service = current_app.services['posts']
    state = post_service.set_like(get_current_actor(), post_id, True)
    return api_response(LikeStateSchema().dump(state))


@posts_bp.route('/<string:post_id>/like', methods=['DELETE'])
@jwt_required()
def unlike(post_id: str):
    post_service = current_app.services['posts']
    state = post_service.set_like(get_current_actor(), post_id, False)
    return api_response(LikeStateSchema().dump(state))


@posts_bp.route('/<string:post_id>/save', methods=['POST'])
@jwt_required()
def toggle_save(post_id: str):
    user_service = current_app.services['users']
    saved = user_service.toggle_save(get_current_actor(), post_id)
    message = "게시글이 저장되었습니다." if saved else "게시글 저장이 취소되었습니다."
    return api_response({"isSaved": saved}, message=message)


@posts_bp.route('/<string:post_id>/save', methods=['DELETE'])
@jwt_required()
def unsave(post_id: str):
    user_service = current_app.services['users']
    saved = user_service.set_saved(get_current_actor(), post_id, False)
    return api_response({"isSaved": saved}, message="게시글 저장이 취소되었습니다.")


@posts_bp.route('/<string:post_id>/share', methods=['POST'])
@jwt_required(optional=True)
def share_post(post_id: str):
    post_service = current_app.services['posts']
    shares = post_service.share_post(post_id)
    return api_response({"shares": shares})


# --- 신고 / 관심 표시 ---
@posts_bp.route('/<string:post_id>/report', methods=['POST'])
@jwt_required()
def report_post(post_id: str):
    """같은 게시글을 다시 신고해도 오류 없이 200 을 반환합니다."""
    user_service = current_app.services['users']
    data = ReportSchema().load(request.get_json(silent=True) or {})
    created = user_service.report_post(get_current_actor(), post_id, data['reason'])
    message = "신고가 접수되었습니다." if created else "이미 신고한 게시글입니다."
    return api_response({"reported": True}, message=message)


@posts_bp.route('/<string:post_id>/interested', methods=['POST'])
@jwt_required()
def mark_interested(post_id: str):
    user_service = current_app.services['users']
    preferences = user_service.mark_post_interest(get_current_actor(), post_id, interested=True)
    return api_response(PreferencesResponseSchema().dump(preferences), message="관심 태그에 추가되었습니다.")


@posts_bp.route('/<string:post_id>/not-interested', methods=['POST'])
@jwt_required()
def mark_not_interested(post_id: str):
    user_service = current_app.services['users']
    preferences = user_service.mark_post_interest(get_current_actor(), post_id, interested=False)
    return api_response(PreferencesResponseSchema().dump(preferences), message="비슷한 게시글을 덜 보여드릴게요.")
