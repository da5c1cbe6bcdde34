# travelhub/api/users/services.py
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pymongo.database import Database

from travelhub.api.posts.services import PostService
from travelhub.core.database import to_object_id
from travelhub.core.exceptions import ResourceNotFoundError
from travelhub.core.permissions import Actor
from travelhub.models.post import normalize_tags
from travelhub.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

_PREFS = 'content_preferences'


class UserService:
    """
    사용자별 콘텐츠 선호도, 저장한 게시물, 신고, 내가 쓴 댓글 조회를 담당하는 서비스 클래스.
    관심 태그와 관심 없음 태그는 서로 배타적이며, 태그를 추가하는 시점에 반대쪽에서 제거합니다.
    """
    def __init__(self, db: Database, post_service: PostService):
        self.db = db
        self.users_ref = db.users
        self.post_service = post_service

    def get_user(self, user_id: Any) -> Dict[str, Any]:
        object_id = to_object_id(user_id)
        user = self.users_ref.find_one({'_id': object_id}) if object_id else None
        if not user:
            raise ResourceNotFoundError("사용자를 찾을 수 없습니다.")
        return user

    # --- 콘텐츠 선호도 ---
    def get_preferences(self, actor: Actor) -> Dict[str, Any]:
        user = self.get_user(actor.user_id)
        prefs = user.get(_PREFS) or {}
        return {
            'interested_tags': prefs.get('interested_tags') or [],
            'not_interested_tags': prefs.get('not_interested_tags') or [],
            'reported_posts': prefs.get('reported_posts') or [],
        }

    def update_preferences(self, actor: Actor, interested_tags: Optional[Iterable[str]] = None,
                           not_interested_tags: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        전달된 목록으로 태그 선호도를 교체합니다.
        두 목록에 같은 태그가 있으면 관심 없음(not_interested) 쪽이 우선합니다.
        """
        current = self.get_preferences(actor)
        interested = normalize_tags(interested_tags) if interested_tags is not None else current['interested_tags']
        not_interested = (normalize_tags(not_interested_tags) if not_interested_tags is not None
                          else current['not_interested_tags'])

        if not_interested_tags is not None:
            interested = [tag for tag in interested if tag not in not_interested]
        else:
            not_interested = [tag for tag in not_interested if tag not in interested]

        self._set_tag_lists(actor, interested, not_interested)
        return self.get_preferences(actor)

    def add_interested_tag(self, actor: Actor, tag: str) -> Dict[str, Any]:
        return self._add_tags(actor, [tag], interested=True)

    def add_not_interested_tag(self, actor: Actor, tag: str) -> Dict[str, Any]:
        return self._add_tags(actor, [tag], interested=False)

    def mark_post_interest(self, actor: Actor, post_id: str, interested: bool) -> Dict[str, Any]:
        """게시글의 모든 태그를 관심(또는 관심 없음) 태그로 등록합니다."""
        post = self.post_service.get_active_post(post_id)
        return self._add_tags(actor, post.get('tags') or [], interested=interested)

    def _add_tags(self, actor: Actor, tags: Iterable[str], interested: bool) -> Dict[str, Any]:
        prefs = self.get_preferences(actor)
        interested_tags = list(prefs['interested_tags'])
        not_interested_tags = list(prefs['not_interested_tags'])
        target, other = (interested_tags, not_interested_tags) if interested else (not_interested_tags, interested_tags)

        for tag in normalize_tags(tags):
            if tag not in target:
                target.append(tag)
            if tag in other:
                other.remove(tag)

        self._set_tag_lists(actor, interested_tags, not_interested_tags)
        return self.get_preferences(actor)

    def _set_tag_lists(self, actor: Actor, interested: List[str], not_interested: List[str]) -> None:
        self.users_ref.update_one(
            {'_id': to_object_id(actor.user_id)},
            {'$set': {
                f'{_PREFS}.interested_tags': interested,
                f'{_PREFS}.not_interested_tags': not_interested,
                'updated_at': DateTimeUtils.now(),
            }}
        )

    # --- 신고 ---
    def report_post(self, actor: Actor, post_id: str, reason: str) -> bool:
        """
        게시글을 신고합니다. 같은 사용자가 같은 게시글을 다시 신고하면 아무것도 하지 않습니다.
        :return: 새 신고가 기록되었으면 True
        """
        post = self.post_service.get_active_post(post_id)
        user_id = to_object_id(actor.user_id)
        reported = self.get_preferences(actor)['reported_posts']
        if any(report.get('post_id') == post['_id'] for report in reported):
            logger.warning(f"이미 신고한 게시글 (user_id: {actor.user_id}, post_id: {post_id})")
            return False

        result = self.users_ref.update_one(
            {'_id': user_id, f'{_PREFS}.reported_posts.post_id': {'$ne': post['_id']}},
            {'$push': {f'{_PREFS}.reported_posts': {
                'post_id': post['_id'], 'reason': reason, 'reported_at': DateTimeUtils.now(),
            }}}
        )
        if result.modified_count == 0:
            logger.warning(f"이미 신고한 게시글 (user_id: {actor.user_id}, post_id: {post_id})")
            return False
        logger.info(f"게시글 신고 접수 (user_id: {actor.user_id}, post_id: {post_id})")
        return True

    # --- 저장한 게시물 ---
    def set_saved(self, actor: Actor, post_id: str, saved: bool) -> bool:
        post = self.post_service.get_active_post(post_id)
        operator = '$addToSet' if saved else '$pull'
        self.users_ref.update_one({'_id': to_object_id(actor.user_id)}, {operator: {'saved_posts': post['_id']}})
        return saved

    def toggle_save(self, actor: Actor, post_id: str) -> bool:
        """저장 여부를 토글하고, 토글 후 저장 상태를 반환합니다."""
        post = self.post_service.get_active_post(post_id)
        user = self.get_user(actor.user_id)
        already_saved = post['_id'] in (user.get('saved_posts') or [])
        return self.set_saved(actor, post_id, not already_saved)

    def get_saved_posts(self, actor: Actor, page: int = 1, limit: int = 25) -> Tuple[List[Dict[str, Any]], int]:
        user = self.get_user(actor.user_id)
        posts = self.post_service.get_posts_by_ids(user.get('saved_posts') or [], viewer=actor)
        start = (page - 1) * limit
        return posts[start:start + limit], len(posts)

    # --- 내가 쓴 댓글/답글 ---
    def get_my_comments(self, actor: Actor) -> List[Dict[str, Any]]:
        """활성 게시글 전체에서 내가 작성한 댓글과 답글을 모아 최신순으로 반환합니다."""
        user_id = to_object_id(actor.user_id)
        posts = list(self.post_service.posts_ref.find({
            'is_active': True,
            '$or': [{'comments.user_id': user_id}, {'comments.replies.user_id': user_id}],
        }))
        self.post_service.populate(posts)

        items = []
        for post in posts:
            post_summary = {'_id': post['_id'], 'content': _excerpt(post.get('content'), 100),
                            'author': post.get('author')}
            for comment in post.get('comments') or []:
                if comment.get('user_id') == user_id:
                    items.append({
                        '_id': comment['_id'],
                        'content': comment.get('content'),
                        'created_at': comment.get('created_at'),
                        'updated_at': comment.get('updated_at'),
                        'like_count': len(comment.get('likes') or []),
                        'reply_count': len(comment.get('replies') or []),
                        'is_reply': False,
                        'post': post_summary,
                    })
                for reply in comment.get('replies') or []:
                    if reply.get('user_id') == user_id:
                        items.append({
                            '_id': reply['_id'],
                            'content': reply.get('content'),
                            'created_at': reply.get('created_at'),
                            'updated_at': reply.get('updated_at'),
                            'like_count': len(reply.get('likes') or []),
                            'reply_count': 0,
                            'is_reply': True,
                            'parent_comment': {
                                '_id': comment['_id'],
                                'content': _excerpt(comment.get('content'), 50),
                                'user': comment.get('user'),
                            },
                            'post': post_summary,
                        })

        items.sort(key=lambda item: DateTimeUtils.ensure_utc(item['created_at']), reverse=True)
        return items


def _excerpt(text: Optional[str], length: int) -> str:
    text = text or ''
    return text if len(text) <= length else text[:length] + '...'
