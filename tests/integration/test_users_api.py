# tests/integration/test_users_api.py
import pytest


@pytest.fixture
def tagged_post(client, alice):
    response = client.post('/api/posts', json={'content': 'Night market', 'tags': ['Food', 'Nightlife']},
                           headers=alice.headers)
    return response.get_json()['data']


def _preferences(client, user):
    return client.get('/api/users/preferences', headers=user.headers).get_json()['data']


def test_new_user_has_empty_preferences(client, bob):
    assert _preferences(client, bob) == {'interestedTags': [], 'notInterestedTags': [], 'reportedPosts': []}


def test_update_preferences_normalizes_and_dedupes(client, bob):
    response = client.put('/api/users/preferences',
                          json={'interestedTags': ['Hiking', 'hiking', ' Beach ']}, headers=bob.headers)

    assert response.status_code == 200
    assert response.get_json()['data']['interestedTags'] == ['hiking', 'beach']


def test_not_interested_wins_when_both_lists_overlap(client, bob):
    client.put('/api/users/preferences',
               json={'interestedTags': ['food', 'hiking'], 'notInterestedTags': ['food']}, headers=bob.headers)

    prefs = _preferences(client, bob)
    assert prefs['interestedTags'] == ['hiking']
    assert prefs['notInterestedTags'] == ['food']


def test_partial_update_keeps_other_list_exclusive(client, bob):
    client.put('/api/users/preferences', json={'notInterestedTags': ['food']}, headers=bob.headers)
    client.put('/api/users/preferences', json={'interestedTags': ['food', 'hiking']}, headers=bob.headers)

    prefs = _preferences(client, bob)
    assert prefs['interestedTags'] == ['food', 'hiking']
    assert prefs['notInterestedTags'] == []


def test_interested_twice_is_single_entry(client, app, bob):
    """같은 관심 태그를 두 번 추가해도 한 번만 저장된다"""
    users = app.services['users']
    users.add_interested_tag(bob.actor, 'Hiking')
    prefs = users.add_interested_tag(bob.actor, 'hiking')

    assert prefs['interested_tags'] == ['hiking']


def test_adding_interested_removes_from_not_interested(client, app, bob):
    users = app.services['users']
    users.add_not_interested_tag(bob.actor, 'food')
    prefs = users.add_interested_tag(bob.actor, 'food')

    assert prefs['interested_tags'] == ['food']
    assert prefs['not_interested_tags'] == []

    prefs = users.add_not_interested_tag(bob.actor, 'food')
    assert prefs['interested_tags'] == []
    assert prefs['not_interested_tags'] == ['food']


def test_mark_post_interest_uses_post_tags(client, bob, tagged_post):
    url = f"/api/posts/{tagged_post['_id']}"

    response = client.post(f'{url}/interested', headers=bob.headers)
    assert response.get_json()['data']['interestedTags'] == ['food', 'nightlife']

    response = client.post(f'{url}/not-interested', headers=bob.headers)
    data = response.get_json()['data']
    assert data['interestedTags'] == []
    assert data['notInterestedTags'] == ['food', 'nightlife']


def test_reporting_twice_keeps_single_entry(client, bob, tagged_post):
    """같은 게시글을 다른 사유로 두 번 신고해도 신고는 하나만 남는다"""
    url = f"/api/posts/{tagged_post['_id']}/report"

    first = client.post(url, json={'reason': 'spam'}, headers=bob.headers)
    second = client.post(url, json={'reason': 'offensive'}, headers=bob.headers)

    assert first.status_code == 200
    assert second.status_code == 200
    reports = _preferences(client, bob)['reportedPosts']
    assert len(reports) == 1
    assert reports[0]['postId'] == tagged_post['_id']
    assert reports[0]['reason'] == 'spam'


def test_report_missing_post(client, bob):
    response = client.post('/api/posts/000000000000000000000000/report', json={'reason': 'spam'},
                           headers=bob.headers)
    assert response.status_code == 404


def test_my_comments_lists_comments_and_replies_newest_first(client, alice, bob, tagged_post):
    post_url = f"/api/posts/{tagged_post['_id']}"
    alice_comment = client.post(f'{post_url}/comment', json={'content': 'Ask me anything'},
                                headers=alice.headers).get_json()['data']
    bob_comment = client.post(f'{post_url}/comment', json={'content': 'Which stall?'},
                              headers=bob.headers).get_json()['data']
    bob_reply = client.post(f"{post_url}/comment/{alice_comment['_id']}/reply", json={'content': 'Thanks'},
                            headers=bob.headers).get_json()['data']

    body = client.get('/api/users/my-comments', headers=bob.headers).get_json()
    items = {item['_id']: item for item in body['data']}

    assert body['count'] == 2
    assert set(items) == {bob_comment['_id'], bob_reply['_id']}
    assert items[bob_comment['_id']]['isReply'] is False
    assert 'parentComment' not in items[bob_comment['_id']]
    assert items[bob_reply['_id']]['isReply'] is True
    assert items[bob_reply['_id']]['parentComment']['_id'] == alice_comment['_id']
    assert items[bob_reply['_id']]['post']['_id'] == tagged_post['_id']


def test_my_comments_skip_deleted_posts(client, alice, bob, tagged_post):
    post_url = f"/api/posts/{tagged_post['_id']}"
    client.post(f'{post_url}/comment', json={'content': 'hi'}, headers=bob.headers)
    client.delete(post_url, headers=alice.headers)

    assert client.get('/api/users/my-comments', headers=bob.headers).get_json()['data'] == []
