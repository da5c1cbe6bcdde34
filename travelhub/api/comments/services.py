# travelhub/api/comments/services.py

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from travelhub.api.posts.services import PostService
from travelhub.core.database import to_object_id
from travelhub.core.exceptions import ResourceNotFoundError
from travelhub.core.permissions import Actor, ensure_can_delete, ensure_can_edit
from travelhub.models.post import Comment, Reply
from travelhub.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class CommentService:
    """
    댓글/답글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글과 답글은 게시글 문서에 내장되어 있으므로 게시글 단위로 읽고 씁니다.
    - 답글은 댓글 아래 한 단계까지만 허용됩니다.
    - 수정은 작성자 본인만, 삭제는 작성자 본인 또는 관리자만 가능합니다.
    """
    def __init__(self, post_service: PostService):
        self.post_service = post_service
        self.posts_ref = post_service.posts_ref

    # --- 내부 헬퍼 ---
    def _find_comment(self, post: Dict[str, Any], comment_id: str) -> Tuple[List[dict], dict]:
        comments = post.get('comments') or []
        object_id = to_object_id(comment_id)
        for comment in comments:
            if comment.get('_id') == object_id:
                return comments, comment
        raise ResourceNotFoundError("댓글을 찾을 수 없습니다.")

    @staticmethod
    def _find_reply(comment: Dict[str, Any], reply_id: str) -> Tuple[List[dict], dict]:
        replies = comment.get('replies') or []
        object_id = to_object_id(reply_id)
        for reply in replies:
            if reply.get('_id') == object_id:
                return replies, reply
        raise ResourceNotFoundError("답글을 찾을 수 없습니다.")

    def _save_comments(self, post: Dict[str, Any], comments: List[dict]) -> None:
        """comments 배열 전체를 한 번의 쓰기로 교체합니다."""
        self.posts_ref.update_one(
            {'_id': post['_id']},
            {'$set': {'comments': comments, 'comment_count': len(comments)}}
        )

    def _populated(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """단일 댓글/답글에 작성자 정보를 채워 반환합니다."""
        holder = {'author_id': None, 'comments': [item]}
        self.post_service.populate([holder])
        return item

    def _populated_reply(self, reply: Dict[str, Any]) -> Dict[str, Any]:
        holder = {'author_id': None, 'comments': [{'user_id': None, 'replies': [reply]}]}
        self.post_service.populate([holder])
        return reply

    # --- 댓글 ---
    def add_comment(self, actor: Actor, post_id: str, content: str) -> Dict[str, Any]:
        post = self.post_service.get_active_post(post_id)
        new_comment = asdict(Comment(user_id=to_object_id(actor.user_id), content=content))
        self.posts_ref.update_one(
            {'_id': post['_id']},
            {'$push': {'comments': new_comment}, '$inc': {'comment_count': 1}}
        )
        return self._populated(new_comment)

    def update_comment(self, actor: Actor, post_id: str, comment_id: str, content: str) -> Dict[str, Any]:
        post = self.post_service.get_active_post(post_id)
        comments, comment = self._find_comment(post, comment_id)
        ensure_can_edit(actor, comment.get('user_id'), "이 댓글을 수정할 권한이 없습니다.")

        comment['content'] = content
        comment['updated_at'] = DateTimeUtils.now()
        self._save_comments(post, comments)
        return self._populated(comment)

    def delete_comment(self, actor: Actor, post_id: str, comment_id: str) -> None:
        post = self.post_service.get_active_post(post_id)
        comments, comment = self._find_comment(post, comment_id)
        ensure_can_delete(actor, comment.get('user_id'), "이 댓글을 삭제할 권한이 없습니다.")

        remaining = [c for c in comments if c is not comment]
        self._save_comments(post, remaining)
        logger.info(f"댓글 삭제 완료 (post_id: {post_id}, comment_id: {comment_id}, actor: {actor.user_id})")

    def toggle_comment_like(self, actor: Actor, post_id: str, comment_id: str,
                            liked: Optional[bool] = None) -> Dict[str, Any]:
        """liked 가 None 이면 토글, True/False 이면 그 상태로 맞춥니다."""
        post = self.post_service.get_active_post(post_id)
        comments, comment = self._find_comment(post, comment_id)
        user_id = to_object_id(actor.user_id)

        likes = comment.setdefault('likes', [])
        target = (user_id not in likes) if liked is None else liked
        if target and user_id not in likes:
            likes.append(user_id)
        elif not target and user_id in likes:
            likes.remove(user_id)
        self._save_comments(post, comments)
        return {'like_count': len(likes), 'is_liked': user_id in likes}

    # --- 답글 ---
    def add_reply(self, actor: Actor, post_id: str, comment_id: str, content: str) -> Dict[str, Any]:
        post = self.post_service.get_active_post(post_id)
        comments, comment = self._find_comment(post, comment_id)

        new_reply = asdict(Reply(user_id=to_object_id(actor.user_id), content=content))
        comment.setdefault('replies', []).append(new_reply)
        self._save_comments(post, comments)
        return self._populated_reply(new_reply)

    def update_reply(self, actor: Actor, post_id: str, comment_id: str, reply_id: str,
                     content: str) -> Dict[str, Any]:
        post = self.post_service.get_active_post(post_id)
        comments, comment = self._find_comment(post, comment_id)
        _, reply = self._find_reply(comment, reply_id)
        ensure_can_edit(actor, reply.get('user_id'), "이 답글을 수정할 권한이 없습니다.")

        reply['content'] = content
        reply['updated_at'] = DateTimeUtils.now()
        self._save_comments(post, comments)
        return self._populated_reply(reply)

    def delete_reply(self, actor: Actor, post_id: str, comment_id: str, reply_id: str) -> None:
        post = self.post_service.get_active_post(post_id)
        comments, comment = self._find_comment(post, comment_id)
        replies, reply = self._find_reply(comment, reply_id)
        ensure_can_delete(actor, reply.get('user_id'), "이 답글을 삭제할 권한이 없습니다.")

        comment['replies'] = [r for r in replies if r is not reply]
        self._save_comments(post, comments)
