# travelhub/api/posts/services.py
import logging
import re
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from travelhub.core.database import to_object_id
from travelhub.core.exceptions import ResourceNotFoundError
from travelhub.core.permissions import Actor, ensure_can_delete, ensure_can_edit
from travelhub.models.post import Post, normalize_tags
from travelhub.services.content_filter import (
    POLICY_DEPRIORITIZE,
    POLICY_EXCLUDE,
    FeedPreferences,
    apply_content_preferences,
)
from travelhub.services.ranking import sort_by_hot_score
from travelhub.utils.datetime_utils import DateTimeUtils
from travelhub.utils.pagination import page_bounds, page_links

logger = logging.getLogger(__name__)

AUTHOR_PROJECTION = {'first_name': 1, 'last_name': 1, 'profile_image': 1}

SORT_ORDERS = {
    'latest': [('created_at', DESCENDING), ('_id', DESCENDING)],
    'popular': [('like_count', DESCENDING), ('created_at', DESCENDING), ('_id', DESCENDING)],
}


class PostService:
    """
    커뮤니티 게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글/답글은 게시글 문서의 comments 배열에 내장되며 CommentService 가 다룹니다.
    - 삭제는 is_active=False 로 표시하는 soft delete 이며, 비활성 게시글은 모든 조회에서 제외됩니다.
    """
    def __init__(self, db: Database, not_interested_policy: str = POLICY_DEPRIORITIZE,
                 boost_interested: bool = True, trending_candidate_limit: int = 500):
        self.db = db
        self.posts_ref = db.posts
        self.users_ref = db.users
        self.not_interested_policy = not_interested_policy
        self.boost_interested = boost_interested
        self.trending_candidate_limit = trending_candidate_limit

    # --- 내부 헬퍼 ---
    def get_active_post(self, post_id: Any) -> Dict[str, Any]:
        object_id = to_object_id(post_id)
        post = self.posts_ref.find_one({'_id': object_id, 'is_active': True}) if object_id else None
        if not post:
            raise ResourceNotFoundError("게시글을 찾을 수 없습니다.")
        return post

    def populate(self, posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """작성자/댓글 작성자/답글 작성자 정보를 users 컬렉션에서 한 번에 조회하여 채웁니다."""
        user_ids = set()
        for post in posts:
            user_ids.add(post.get('author_id'))
            for comment in post.get('comments') or []:
                user_ids.add(comment.get('user_id'))
                for reply in comment.get('replies') or []:
                    user_ids.add(reply.get('user_id'))
        user_ids.discard(None)

        users = {
            user['_id']: user
            for user in self.users_ref.find({'_id': {'$in': list(user_ids)}}, AUTHOR_PROJECTION)
        } if user_ids else {}

        for post in posts:
            post['author'] = users.get(post.get('author_id'))
            for comment in post.get('comments') or []:
                comment['user'] = users.get(comment.get('user_id'))
                for reply in comment.get('replies') or []:
                    reply['user'] = users.get(reply.get('user_id'))
        return posts

    def decorate_for_viewer(self, posts: Iterable[Dict[str, Any]], viewer: Optional[Actor],
                            viewer_doc: Optional[Dict[str, Any]] = None) -> None:
        """조회자 기준 is_liked / is_saved 값을 채웁니다."""
        if viewer is None:
            return
        viewer_id = to_object_id(viewer.user_id)
        if viewer_doc is None:
            viewer_doc = self.users_ref.find_one({'_id': viewer_id}, {'saved_posts': 1}) or {}
        saved = set(viewer_doc.get('saved_posts') or [])
        for post in posts:
            post['is_liked'] = viewer_id in (post.get('likes') or [])
            post['is_saved'] = post['_id'] in saved

    # --- 생성/조회 ---
    def create_post(self, author: Actor, data: Dict[str, Any]) -> Dict[str, Any]:
        """새 게시글을 생성하고 작성자 정보를 채워 반환합니다."""
        data = dict(data)
        data['tags'] = normalize_tags(data.get('tags'))
        new_post = Post(author_id=to_object_id(author.user_id), **data)
        doc = asdict(new_post)
        result = self.posts_ref.insert_one(doc)
        doc['_id'] = result.inserted_id
        logger.info(f"게시글 생성 완료 (post_id: {doc['_id']}, author: {author.user_id})")
        return self.populate([doc])[0]

    def list_posts(self, viewer: Optional[Actor] = None, tag: Optional[str] = None,
                   location: Optional[str] = None, sort: str = 'latest', group: Optional[str] = None,
                   page: int = 1, limit: int = 25) -> Tuple[List[Dict[str, Any]], int, Dict[str, Any]]:
        """
        피드를 조회합니다.
        - sort: latest(최신순) / popular(좋아요순) / trending(hot score 순). 그 외 값은 latest.
        - 로그인한 조회자의 신고 게시물은 제외되고, 콘텐츠 선호도 정책이 적용됩니다.
        :return: (게시글 목록, 전체 개수, pagination)
        """
        conditions: List[Dict[str, Any]] = [{'is_active': True}]
        if tag:
            conditions.append({'tags': tag.strip().lower()})
        if location:
            conditions.append({'location': {'$regex': re.escape(location.strip()), '$options': 'i'}})
        if group:
            conditions.append({'group_id': group})

        viewer_doc = None
        preferences = FeedPreferences()
        if viewer is not None:
            viewer_doc = self.users_ref.find_one(
                {'_id': to_object_id(viewer.user_id)}, {'saved_posts': 1, 'content_preferences': 1}
            ) or {}
            preferences = FeedPreferences.from_user(viewer_doc)
            if preferences.reported_post_ids:
                reported = [to_object_id(pid) for pid in preferences.reported_post_ids]
                conditions.append({'_id': {'$nin': reported}})
            if self.not_interested_policy == POLICY_EXCLUDE and preferences.not_interested_tags:
                conditions.append({'tags': {'$nin': sorted(preferences.not_interested_tags)}})

        query = conditions[0] if len(conditions) == 1 else {'$and': conditions}
        total = self.posts_ref.count_documents(query)
        skip = page_bounds(page, limit)

        if sort == 'trending':
            candidates = sort_by_hot_score(list(
                self.posts_ref.find(query).sort(SORT_ORDERS['latest']).limit(self.trending_candidate_limit)
            ))
            if not preferences.is_empty:
                candidates = apply_content_preferences(
                    candidates, preferences, policy=self.not_interested_policy,
                    boost_interested=self.boost_interested
                )
            posts = candidates[skip:skip + limit]
        else:
            order = SORT_ORDERS.get(sort, SORT_ORDERS['latest'])
            posts = self._page_across_bands(self._preference_bands(query, preferences), order, skip, limit)

        self.populate(posts)
        self.decorate_for_viewer(posts, viewer, viewer_doc)
        return posts, total, page_links(page, limit, total)

    def _preference_bands(self, query: Dict[str, Any], preferences: FeedPreferences) -> List[Dict[str, Any]]:
        """
        피드 쿼리를 관심(앞) / 일반 / 관심 없음(뒤) 순서의 쿼리 목록으로 나눕니다.
        페이지를 나누기 전에 순서가 정해지므로 관심 없음 게시글은 피드 전체에서 뒤로 밀립니다.
        """
        interested = sorted(preferences.interested_tags - preferences.not_interested_tags) \
            if self.boost_interested else []
        sunk = sorted(preferences.not_interested_tags) \
            if self.not_interested_policy == POLICY_DEPRIORITIZE else []
        if not interested and not sunk:
            return [query]

        bands = []
        if interested:
            boosted = {'tags': {'$in': interested}}
            if sunk:
                boosted = {'$and': [boosted, {'tags': {'$nin': sunk}}]}
            bands.append({'$and': [query, boosted]})
        bands.append({'$and': [query, {'tags': {'$nin': interested + sunk}}]})
        if sunk:
            bands.append({'$and': [query, {'tags': {'$in': sunk}}]})
        return bands

    def _page_across_bands(self, bands: List[Dict[str, Any]], order, skip: int, limit: int) -> List[Dict[str, Any]]:
        posts: List[Dict[str, Any]] = []
        for band in bands:
            if len(posts) >= limit:
                break
            band_total = self.posts_ref.count_documents(band)
            if skip >= band_total:
                skip -= band_total
                continue
            posts.extend(self.posts_ref.find(band).sort(order).skip(skip).limit(limit - len(posts)))
            skip = 0
        return posts

    def get_post(self, post_id: str, viewer: Optional[Actor] = None) -> Dict[str, Any]:
        post = self.get_active_post(post_id)
        self.populate([post])
        self.decorate_for_viewer([post], viewer)
        return post

    def get_user_posts(self, author_id: str, viewer: Optional[Actor] = None,
                       page: int = 1, limit: int = 25) -> Tuple[List[Dict[str, Any]], int]:
        """특정 사용자가 작성한 활성 게시글을 최신순으로 조회합니다."""
        object_id = to_object_id(author_id)
        if object_id is None:
            return [], 0
        query = {'author_id': object_id, 'is_active': True}
        total = self.posts_ref.count_documents(query)
        posts = list(
            self.posts_ref.find(query).sort(SORT_ORDERS['latest']).skip(page_bounds(page, limit)).limit(limit)
        )
        self.populate(posts)
        self.decorate_for_viewer(posts, viewer)
        return posts, total

    def get_posts_by_ids(self, post_ids: List[ObjectId], viewer: Optional[Actor] = None) -> List[Dict[str, Any]]:
        """주어진 ID 중 활성 게시글만 최신순으로 반환합니다."""
        if not post_ids:
            return []
        posts = list(
            self.posts_ref.find({'_id': {'$in': list(post_ids)}, 'is_active': True}).sort(SORT_ORDERS['latest'])
        )
        self.populate(posts)
        self.decorate_for_viewer(posts, viewer)
        return posts

    # --- 수정/삭제 ---
    def update_post(self, actor: Actor, post_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """작성자 본인만 수정할 수 있습니다. (관리자도 내용 수정 불가)"""
        post = self.get_active_post(post_id)
        ensure_can_edit(actor, post.get('author_id'), "이 게시글을 수정할 권한이 없습니다.")

        update_data = {key: data[key] for key in ('content', 'location', 'tags') if key in data}
        if 'tags' in update_data:
            update_data['tags'] = normalize_tags(update_data['tags'])
        update_data['updated_at'] = DateTimeUtils.now()

        updated = self.posts_ref.find_one_and_update(
            {'_id': post['_id']}, {'$set': update_data}, return_document=ReturnDocument.AFTER
        )
        self.populate([updated])
        self.decorate_for_viewer([updated], actor)
        return updated

    def delete_post(self, actor: Actor, post_id: str) -> None:
        """작성자 본인 또는 관리자만 삭제할 수 있으며, 문서는 is_active=False 로 남습니다."""
        post = self.get_active_post(post_id)
        ensure_can_delete(actor, post.get('author_id'), "이 게시글을 삭제할 권한이 없습니다.")
        self.posts_ref.update_one(
            {'_id': post['_id']}, {'$set': {'is_active': False, 'updated_at': DateTimeUtils.now()}}
        )
        logger.info(f"게시글 삭제(soft) 완료 (post_id: {post_id}, actor: {actor.user_id}, role: {actor.role})")

    # --- 좋아요/공유 ---
    def set_like(self, actor: Actor, post_id: str, liked: bool) -> Dict[str, Any]:
        """
        좋아요 상태를 지정한 값으로 맞춥니다. 이미 그 상태라면 아무것도 바꾸지 않습니다.
        likes 배열의 포함 여부를 필터 조건에 넣어 한 문서에 대한 단일 쓰기로 처리합니다.
        """
        post = self.get_active_post(post_id)
        user_id = to_object_id(actor.user_id)
        if liked:
            updated = self.posts_ref.find_one_and_update(
                {'_id': post['_id'], 'likes': {'$nin': [user_id]}},
                {'$push': {'likes': user_id}, '$inc': {'like_count': 1}},
                return_document=ReturnDocument.AFTER
            )
        else:
            updated = self.posts_ref.find_one_and_update(
                {'_id': post['_id'], 'likes': user_id},
                {'$pull': {'likes': user_id}, '$inc': {'like_count': -1}},
                return_document=ReturnDocument.AFTER
            )
        if updated is None:
            updated = self.posts_ref.find_one({'_id': post['_id']})

        likes = updated.get('likes') or []
        return {'like_count': len(likes), 'is_liked': user_id in likes}

    def toggle_like(self, actor: Actor, post_id: str) -> Dict[str, Any]:
        """좋아요를 누르거나 취소합니다. 같은 사용자가 두 번 호출하면 원래 상태로 돌아갑니다."""
        post = self.get_active_post(post_id)
        already_liked = to_object_id(actor.user_id) in (post.get('likes') or [])
        return self.set_like(actor, post_id, not already_liked)

    def share_post(self, post_id: str) -> int:
        post = self.get_active_post(post_id)
        updated = self.posts_ref.find_one_and_update(
            {'_id': post['_id']}, {'$inc': {'shares': 1}}, return_document=ReturnDocument.AFTER
        )
        return updated.get('shares', 0)
