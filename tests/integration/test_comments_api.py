# tests/integration/test_comments_api.py
import pytest
from bson import ObjectId


@pytest.fixture
def post(client, alice):
    response = client.post('/api/posts', json={'content': 'Where to eat in Busan?'}, headers=alice.headers)
    return response.get_json()['data']


def _comment(client, user, post, content='Try the fish market'):
    response = client.post(f"/api/posts/{post['_id']}/comment", json={'content': content}, headers=user.headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


def _reply(client, user, post, comment, content='Agreed!'):
    url = f"/api/posts/{post['_id']}/comment/{comment['_id']}/reply"
    response = client.post(url, json={'content': content}, headers=user.headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


def _get_post(client, post):
    return client.get(f"/api/posts/{post['_id']}").get_json()['data']


def test_add_comment(client, bob, post):
    comment = _comment(client, bob, post, '  Try the fish market  ')

    assert ObjectId.is_valid(comment['_id'])
    assert comment['content'] == 'Try the fish market'
    assert comment['user']['firstName'] == 'Bob'
    assert comment['createdAt']

    fetched = _get_post(client, post)
    assert fetched['commentCount'] == 1
    assert fetched['comments'][0]['_id'] == comment['_id']
    assert fetched['comments'][0]['user']['_id'] == bob.id


def test_comment_validation(client, bob, post):
    url = f"/api/posts/{post['_id']}/comment"
    assert client.post(url, json={'content': ''}, headers=bob.headers).status_code == 400
    assert client.post(url, json={'content': 'x' * 1001}, headers=bob.headers).status_code == 400
    assert client.post(url, json={'content': 'hi'}).status_code == 401


def test_comment_on_missing_post(client, bob):
    response = client.post(f'/api/posts/{ObjectId()}/comment', json={'content': 'hi'}, headers=bob.headers)
    assert response.status_code == 404


def test_only_comment_author_can_edit(client, alice, bob, admin, post):
    comment = _comment(client, bob, post)
    url = f"/api/posts/{post['_id']}/comment/{comment['_id']}"

    assert client.put(url, json={'content': 'edit'}, headers=alice.headers).status_code == 403
    assert client.put(url, json={'content': 'edit'}, headers=admin.headers).status_code == 403

    response = client.put(url, json={'content': 'Edited comment'}, headers=bob.headers)
    assert response.status_code == 200
    assert response.get_json()['data']['content'] == 'Edited comment'
    assert _get_post(client, post)['comments'][0]['content'] == 'Edited comment'


def test_comment_delete_by_author_or_admin(client, alice, bob, admin, post):
    first = _comment(client, bob, post, 'first')
    second = _comment(client, bob, post, 'second')
    base = f"/api/posts/{post['_id']}/comment"

    assert client.delete(f"{base}/{first['_id']}", headers=alice.headers).status_code == 403
    assert client.delete(f"{base}/{first['_id']}", headers=bob.headers).status_code == 200
    assert client.delete(f"{base}/{second['_id']}", headers=admin.headers).status_code == 200
    assert client.delete(f"{base}/{second['_id']}", headers=admin.headers).status_code == 404

    fetched = _get_post(client, post)
    assert fetched['comments'] == []
    assert fetched['commentCount'] == 0


def test_replies_are_nested_under_comment(client, alice, bob, post):
    comment = _comment(client, bob, post)
    reply = _reply(client, alice, post, comment, 'Thanks!')

    assert reply['user']['_id'] == alice.id
    [stored] = _get_post(client, post)['comments']
    assert [r['_id'] for r in stored['replies']] == [reply['_id']]
    assert stored['replies'][0]['content'] == 'Thanks!'


def test_reply_to_missing_comment(client, alice, post):
    url = f"/api/posts/{post['_id']}/comment/{ObjectId()}/reply"
    assert client.post(url, json={'content': 'hi'}, headers=alice.headers).status_code == 404


def test_reply_edit_and_delete_rules(client, alice, bob, admin, post):
    comment = _comment(client, bob, post)
    reply = _reply(client, alice, post, comment)
    url = f"/api/posts/{post['_id']}/comment/{comment['_id']}/reply/{reply['_id']}"

    assert client.put(url, json={'content': 'nope'}, headers=bob.headers).status_code == 403
    response = client.put(url, json={'content': 'Edited reply'}, headers=alice.headers)
    assert response.get_json()['data']['content'] == 'Edited reply'

    assert client.delete(url, headers=bob.headers).status_code == 403
    assert client.delete(url, headers=admin.headers).status_code == 200
    assert _get_post(client, post)['comments'][0]['replies'] == []


def test_deleting_comment_removes_its_replies(client, alice, bob, post):
    comment = _comment(client, bob, post)
    _reply(client, alice, post, comment)

    client.delete(f"/api/posts/{post['_id']}/comment/{comment['_id']}", headers=bob.headers)

    assert _get_post(client, post)['comments'] == []


def test_comment_like_toggle(client, alice, bob, post):
    comment = _comment(client, bob, post)
    url = f"/api/posts/{post['_id']}/comment/{comment['_id']}/like"

    assert client.post(url, headers=alice.headers).get_json()['data'] == {'likeCount': 1, 'isLiked': True}
    assert client.post(url, headers=alice.headers).get_json()['data'] == {'likeCount': 0, 'isLiked': False}

    client.post(url, headers=alice.headers)
    assert client.delete(url, headers=alice.headers).get_json()['data'] == {'likeCount': 0, 'isLiked': False}
    assert client.delete(url, headers=alice.headers).get_json()['data'] == {'likeCount': 0, 'isLiked': False}
