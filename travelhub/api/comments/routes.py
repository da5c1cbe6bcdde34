# travelhub/api/comments/routes.py
"""
게시글에 내장된 댓글/답글 엔드포인트.
posts 와 같은 /api/posts 접두사 아래에 등록됩니다.
"""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from travelhub.api.posts.schemas import CommentResponseSchema, LikeStateSchema, ReplyResponseSchema
from travelhub.core.security import get_current_actor
from travelhub.utils.responses import api_response

from .schemas import CommentCreateSchema

comments_bp = Blueprint('comments_bp', __name__)


def _load_content() -> str:
    return CommentCreateSchema().load(request.get_json(silent=True) or {})['content']


@comments_bp.route('/<string:post_id>/comment', methods=['POST'])
@jwt_required()
def add_comment(post_id: str):
    comment_service = current_app.services['comments']
    comment = comment_service.add_comment(get_current_actor(), post_id, _load_content())
    return api_response(CommentResponseSchema().dump(comment), message="댓글이 등록되었습니다.", status=201)


@comments_bp.route('/<string:post_id>/comment/<string:comment_id>', methods=['PUT'])
@jwt_required()
def update_comment(post_id: str, comment_id: str):
    """[작성자 전용] 댓글 수정"""
    comment_service = current_app.services['comments']
    comment = comment_service.update_comment(get_current_actor(), post_id, comment_id, _load_content())
    return api_response(CommentResponseSchema().dump(comment), message="댓글이 수정되었습니다.")


@comments_bp.route('/<string:post_id>/comment/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(post_id: str, comment_id: str):
    """[작성자 또는 관리자] 댓글 삭제. 딸린 답글도 함께 삭제됩니다."""
    comment_service = current_app.services['comments']
    comment_service.delete_comment(get_current_actor(), post_id, comment_id)
    return api_response(message="댓글이 삭제되었습니다.")


@comments_bp.route('/<string:post_id>/comment/<string:comment_id>/like', methods=['POST'])
@jwt_required()
def toggle_comment_like(post_id: str, comment_id: str):
    comment_service = current_app.services['comments']
    state = comment_service.toggle_comment_like(get_current_actor(), post_id, comment_id)
    return api_response(LikeStateSchema().dump(state))


@comments_bp.route('/<string:post_id>/comment/<string:comment_id>/like', methods=['DELETE'])
@jwt_required()
def unlike_comment(post_id: str, comment_id: str):
    comment_service = current_app.services['comments']
    state = comment_service.toggle_comment_like(get_current_actor(), post_id, comment_id, liked=False)
    return api_response(LikeStateSchema().dump(state))


# --- 답글 ---
@comments_bp.route('/<string:post_id>/comment/<string:comment_id>/reply', methods=['POST'])
@jwt_required()
def add_reply(post_id: str, comment_id: str):
    comment_service = current_app.services['comments']
    reply = comment_service.add_reply(get_current_actor(), post_id, comment_id, _load_content())
    return api_response(ReplyResponseSchema().dump(reply), message="답글이 등록되었습니다.", status=201)


@comments_bp.route('/<string:post_id>/comment/<string:comment_id>/reply/<string:reply_id>', methods=['PUT'])
@jwt_required()
def update_reply(post_id: str, comment_id: str, reply_id: str):
    comment_service = current_app.services['comments']
    reply = comment_service.update_reply(get_current_actor(), post_id, comment_id, reply_id, _load_content())
    return api_response(ReplyResponseSchema().dump(reply), message="답글이 수정되었습니다.")


@comments_bp.route('/<string:post_id>/comment/<string:comment_id>/reply/<string:reply_id>', methods=['DELETE'])
@jwt_required()
def delete_reply(post_id: str, comment_id: str, reply_id: str):
    comment_service = current_app.services['comments']
    comment_service.delete_reply(get_current_actor(), post_id, comment_id, reply_id)
    return api_response(message="답글이 삭제되었습니다.")
