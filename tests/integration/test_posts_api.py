# tests/integration/test_posts_api.py
from datetime import timedelta

import pytest
from bson import ObjectId

from travelhub.utils.datetime_utils import DateTimeUtils


def _create_post(client, user, content='Hello travelers', **fields):
    response = client.post('/api/posts', json=dict(content=content, **fields), headers=user.headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


def _feed(client, user=None, query=''):
    headers = user.headers if user else {}
    response = client.get(f'/api/posts{query}', headers=headers)
    assert response.status_code == 200
    return response.get_json()


def _feed_ids(client, user=None, query=''):
    return [post['_id'] for post in _feed(client, user, query)['data']]


def test_create_post_normalizes_tags_and_populates_author(client, alice):
    post = _create_post(client, alice, tags=['Food', ' Tokyo ', 'food'], location='Tokyo, Japan')

    assert post['tags'] == ['food', 'tokyo']
    assert post['author']['_id'] == alice.id
    assert post['author']['firstName'] == 'Alice'
    assert post['likeCount'] == 0
    assert post['commentCount'] == 0
    assert post['isLiked'] is False


def test_create_post_validation(client, alice):
    response = client.post('/api/posts', json={'content': '   '}, headers=alice.headers)
    assert response.status_code == 400
    assert 'content' in response.get_json()['details']

    response = client.post('/api/posts', json={'content': 'x' * 2001}, headers=alice.headers)
    assert response.status_code == 400


def test_feed_is_public_and_filters_by_tag_case_insensitively(client, alice):
    """태그 필터는 대소문자를 구분하지 않는다"""
    tokyo = _create_post(client, alice, tags=['Food', 'Tokyo'])
    _create_post(client, alice, tags=['beach'])

    assert _feed_ids(client, query='?tag=food') == [tokyo['_id']]
    assert _feed_ids(client, query='?tag=FOOD') == [tokyo['_id']]


def test_feed_filters_by_location_substring_and_group(client, alice):
    seoul = _create_post(client, alice, location='Seoul, Korea', group='backpackers')
    _create_post(client, alice, location='Paris')

    assert _feed_ids(client, query='?location=seoul') == [seoul['_id']]
    assert _feed_ids(client, query='?group=backpackers') == [seoul['_id']]


def test_feed_sorting(client, app, alice, bob):
    old_popular = _create_post(client, alice, content='old popular')
    new_quiet = _create_post(client, alice, content='new quiet')
    for user in (alice, bob):
        client.post(f"/api/posts/{old_popular['_id']}/like", headers=user.headers)

    assert _feed_ids(client, query='?sort=latest') == [new_quiet['_id'], old_popular['_id']]
    assert _feed_ids(client, query='?sort=popular') == [old_popular['_id'], new_quiet['_id']]
    assert _feed_ids(client, query='?sort=trending') == [old_popular['_id'], new_quiet['_id']]
    assert _feed_ids(client, query='?sort=weird') == [new_quiet['_id'], old_popular['_id']]


def test_trending_prefers_fresh_engagement(client, app, db, alice, bob):
    stale = _create_post(client, alice, content='stale')
    fresh = _create_post(client, alice, content='fresh')
    db.posts.update_one({'_id': ObjectId(stale['_id'])}, {'$set': {
        'created_at': DateTimeUtils.now() - timedelta(days=3), 'like_count': 5,
    }})
    db.posts.update_one({'_id': ObjectId(fresh['_id'])}, {'$set': {'like_count': 3}})

    assert _feed_ids(client, query='?sort=trending') == [fresh['_id'], stale['_id']]


def test_feed_pagination(client, alice):
    ids = [_create_post(client, alice, content=f'post {i}')['_id'] for i in range(3)]

    first = _feed(client, query='?limit=2&page=1')
    second = _feed(client, query='?limit=2&page=2')

    assert [p['_id'] for p in first['data']] == [ids[2], ids[1]]
    assert first['total'] == 3
    assert first['count'] == 2
    assert first['pagination'] == {'next': {'page': 2, 'limit': 2}}
    assert [p['_id'] for p in second['data']] == [ids[0]]
    assert second['pagination'] == {'prev': {'page': 1, 'limit': 2}}


def test_like_toggle_round_trip(client, alice, bob):
    """같은 사용자가 좋아요를 두 번 누르면 원래 상태로 돌아온다"""
    post = _create_post(client, alice)
    url = f"/api/posts/{post['_id']}/like"

    liked = client.post(url, headers=bob.headers).get_json()['data']
    assert liked == {'likeCount': 1, 'isLiked': True}

    unliked = client.post(url, headers=bob.headers).get_json()['data']
    assert unliked == {'likeCount': 0, 'isLiked': False}

    fetched = client.get(f"/api/posts/{post['_id']}", headers=bob.headers).get_json()['data']
    assert fetched['likes'] == []
    assert fetched['isLiked'] is False


def test_unlike_is_idempotent(client, alice, bob):
    post = _create_post(client, alice)
    url = f"/api/posts/{post['_id']}/like"
    client.post(url, headers=bob.headers)

    for _ in range(2):
        response = client.delete(url, headers=bob.headers)
        assert response.get_json()['data'] == {'likeCount': 0, 'isLiked': False}


def test_like_put_is_idempotent(client, alice, bob):
    """PUT 좋아요는 여러 번 호출해도 좋아요 상태를 유지한다"""
    post = _create_post(client, alice)
    url = f"/api/posts/{post['_id']}/like"

    for _ in range(2):
        response = client.put(url, headers=bob.headers)
        assert response.status_code == 200
        assert response.get_json()['data'] == {'likeCount': 1, 'isLiked': True}


def test_like_requires_authentication(client, alice):
    post = _create_post(client, alice)
    assert client.post(f"/api/posts/{post['_id']}/like").status_code == 401


def test_update_post_author_only(client, alice, bob, admin):
    post = _create_post(client, alice, tags=['a'])
    url = f"/api/posts/{post['_id']}"

    assert client.put(url, json={'content': 'hacked'}, headers=bob.headers).status_code == 403
    assert client.put(url, json={'content': 'moderated'}, headers=admin.headers).status_code == 403

    response = client.put(url, json={'content': 'edited', 'tags': ['New'], 'likeCount': 99}, headers=alice.headers)
    updated = response.get_json()['data']
    assert response.status_code == 200
    assert updated['content'] == 'edited'
    assert updated['tags'] == ['new']
    assert updated['likeCount'] == 0


def test_delete_post_by_non_author_then_admin(client, alice, bob, admin):
    """작성자가 아닌 사용자는 403, 관리자는 삭제 가능하며 이후 피드에서 사라진다"""
    post = _create_post(client, alice)
    url = f"/api/posts/{post['_id']}"

    response = client.delete(url, headers=bob.headers)
    assert response.status_code == 403
    assert response.get_json()['error_code'] == 'FORBIDDEN'

    assert client.delete(url, headers=admin.headers).status_code == 200
    assert post['_id'] not in _feed_ids(client)
    assert client.get(url).status_code == 404


def test_deleted_post_is_soft_deleted(client, db, alice):
    post = _create_post(client, alice)
    client.delete(f"/api/posts/{post['_id']}", headers=alice.headers)

    stored = db.posts.find_one({'_id': ObjectId(post['_id'])})
    assert stored['is_active'] is False


def test_missing_post_is_not_found(client, alice):
    assert client.get(f'/api/posts/{ObjectId()}').status_code == 404
    assert client.post(f'/api/posts/{ObjectId()}/like', headers=alice.headers).status_code == 404


def test_save_toggle_and_saved_posts(client, alice, bob):
    post = _create_post(client, alice)
    url = f"/api/posts/{post['_id']}/save"

    assert client.post(url, headers=bob.headers).get_json()['data'] == {'isSaved': True}
    saved = client.get('/api/users/saved-posts', headers=bob.headers).get_json()
    assert [p['_id'] for p in saved['data']] == [post['_id']]
    assert saved['data'][0]['isSaved'] is True

    assert client.post(url, headers=bob.headers).get_json()['data'] == {'isSaved': False}
    assert client.get('/api/users/saved-posts', headers=bob.headers).get_json()['data'] == []

    client.post(url, headers=bob.headers)
    assert client.delete(url, headers=bob.headers).get_json()['data'] == {'isSaved': False}
    assert client.delete(url, headers=bob.headers).get_json()['data'] == {'isSaved': False}


def test_share_increments_counter(client, alice):
    post = _create_post(client, alice)
    client.post(f"/api/posts/{post['_id']}/share")
    response = client.post(f"/api/posts/{post['_id']}/share")
    assert response.get_json()['data'] == {'shares': 2}


def test_user_posts(client, alice, bob):
    mine = _create_post(client, alice)
    _create_post(client, bob)

    body = client.get(f'/api/posts/user/{alice.id}').get_json()
    assert [p['_id'] for p in body['data']] == [mine['_id']]
    assert body['total'] == 1


@pytest.mark.parametrize('policy', ['deprioritize', 'exclude'])
def test_not_interested_tags_in_feed(client, app, alice, bob, policy):
    app.services['posts'].not_interested_policy = policy
    food = _create_post(client, alice, content='ramen', tags=['food'])
    nightlife = _create_post(client, alice, content='club', tags=['nightlife'])
    client.put('/api/users/preferences', json={'notInterestedTags': ['nightlife']}, headers=bob.headers)

    feed = _feed(client, bob)
    ids = [p['_id'] for p in feed['data']]

    if policy == 'exclude':
        assert ids == [food['_id']]
        assert feed['total'] == 1
    else:
        assert ids == [food['_id'], nightlife['_id']]
    # 비로그인 조회에는 영향 없음
    assert _feed_ids(client) == [nightlife['_id'], food['_id']]


def test_not_interested_posts_sink_across_pages(client, alice, bob):
    """관심 없음 게시글은 현재 페이지 안이 아니라 피드 전체에서 뒤로 밀린다"""
    food = _create_post(client, alice, content='ramen', tags=['food'])
    hike_1 = _create_post(client, alice, content='ridge', tags=['hike'])
    hike_2 = _create_post(client, alice, content='summit', tags=['hike'])
    client.put('/api/users/preferences', json={'notInterestedTags': ['hike']}, headers=bob.headers)

    pages = [_feed_ids(client, bob, f'?limit=1&page={page}') for page in (1, 2, 3)]

    assert pages == [[food['_id']], [hike_2['_id']], [hike_1['_id']]]
    assert _feed(client, bob, '?limit=1')['total'] == 3


def test_interested_posts_rise_across_pages(client, alice, bob):
    beach = _create_post(client, alice, content='sand', tags=['beach'])
    _create_post(client, alice, content='museum', tags=['art'])
    _create_post(client, alice, content='gallery', tags=['art'])
    client.put('/api/users/preferences', json={'interestedTags': ['beach']}, headers=bob.headers)

    assert _feed_ids(client, bob, '?limit=1&page=1') == [beach['_id']]
    assert beach['_id'] not in _feed_ids(client, bob, '?limit=2&page=2')


def test_reported_posts_are_hidden_from_reporter(client, alice, bob):
    post = _create_post(client, alice)

    response = client.post(f"/api/posts/{post['_id']}/report", json={'reason': 'spam'}, headers=bob.headers)
    assert response.status_code == 200

    assert post['_id'] not in _feed_ids(client, bob)
    assert post['_id'] in _feed_ids(client, alice)


def test_report_requires_reason(client, alice, bob):
    post = _create_post(client, alice)
    response = client.post(f"/api/posts/{post['_id']}/report", json={}, headers=bob.headers)
    assert response.status_code == 400
    assert 'reason' in response.get_json()['details']


def test_feed_limit_is_capped(client, app, alice):
    app.config['MAX_PAGE_LIMIT'] = 2
    for i in range(3):
        _create_post(client, alice, content=f'post {i}')

    body = _feed(client, query='?limit=500')

    assert body['count'] == 2
    assert body['pagination'] == {'next': {'page': 2, 'limit': 2}}
