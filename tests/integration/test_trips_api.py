# tests/integration/test_trips_api.py
import pytest
from bson import ObjectId

ROUTE = {
    'name': 'Coastal Run',
    'startLocation': 'LA',
    'destination': 'SF',
    'travelMode': 'car',
    'estimatedTime': '6h',
    'estimatedDistance': '610 km',
    'mapLocations': [{'name': 'LA', 'coordinates': [34.05, -118.24], 'type': 'start'}],
}


def _stops(count):
    return [{'id': f's{i}', 'location': f'Stop {i}', 'coordinates': {'lat': 35.0 + i, 'lng': -120.0}}
            for i in range(count)]


def _create(client, user, **overrides):
    response = client.post('/api/trips', json=dict(ROUTE, **overrides), headers=user.headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


def test_trips_require_authentication(client):
    response = client.get('/api/trips')
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_create_trip_with_too_many_stops_then_three(client, alice):
    """경유지 6개는 검증 오류, 3개는 201 + draft/isPlanned=false"""
    response = client.post('/api/trips', json=dict(ROUTE, stops=_stops(6)), headers=alice.headers)
    body = response.get_json()
    assert response.status_code == 400
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert 'stops' in body['details']
    assert '5' in body['details']['stops'][0]

    response = client.post('/api/trips', json=dict(ROUTE, stops=_stops(3)), headers=alice.headers)
    body = response.get_json()
    assert response.status_code == 201
    assert body['success'] is True
    assert body['data']['status'] == 'draft'
    assert body['data']['isPlanned'] is False
    assert body['data']['userId'] == alice.id
    assert len(body['data']['stops']) == 3


def test_exactly_five_stops_is_allowed(client, alice):
    trip = _create(client, alice, stops=_stops(5))
    assert len(trip['stops']) == 5


def test_validation_reports_every_failing_field(client, alice):
    response = client.post('/api/trips', json={'name': '   ', 'travelMode': 'boat'}, headers=alice.headers)
    details = response.get_json()['details']
    assert response.status_code == 400
    assert {'name', 'startLocation', 'destination', 'travelMode'} <= set(details)


def test_other_users_trip_is_forbidden_not_missing(client, alice, bob):
    trip = _create(client, alice)

    for method in ('get', 'delete'):
        response = getattr(client, method)(f"/api/trips/{trip['_id']}", headers=bob.headers)
        assert response.status_code == 403
        assert response.get_json()['error_code'] == 'FORBIDDEN'

    response = client.put(f"/api/trips/{trip['_id']}", json={'name': 'Mine now'}, headers=bob.headers)
    assert response.status_code == 403
    response = client.post(f"/api/trips/{trip['_id']}/duplicate", headers=bob.headers)
    assert response.status_code == 403


def test_admin_cannot_access_other_users_trip(client, alice, admin):
    trip = _create(client, alice)
    response = client.delete(f"/api/trips/{trip['_id']}", headers=admin.headers)
    assert response.status_code == 403


@pytest.mark.parametrize('trip_id', [str(ObjectId()), 'not-an-object-id'])
def test_missing_trip_is_not_found(client, alice, trip_id):
    response = client.get(f'/api/trips/{trip_id}', headers=alice.headers)
    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'RESOURCE_NOT_FOUND'


def test_duplicate_copies_route_and_resets_state(client, alice):
    trip = _create(client, alice, stops=_stops(2), isPlanned=True, status='planned')

    response = client.post(f"/api/trips/{trip['_id']}/duplicate", headers=alice.headers)
    copied = response.get_json()['data']

    assert response.status_code == 201
    assert copied['_id'] != trip['_id']
    assert copied['name'] == 'Coastal Run (Copy)'
    assert copied['isPlanned'] is False
    assert copied['status'] == 'draft'
    for key in ('startLocation', 'destination', 'stops', 'travelMode',
                'estimatedTime', 'estimatedDistance', 'mapLocations'):
        assert copied[key] == trip[key]


def test_update_only_overwrites_given_fields(client, alice):
    trip = _create(client, alice)

    response = client.put(f"/api/trips/{trip['_id']}", json={'name': '  Renamed  '}, headers=alice.headers)
    updated = response.get_json()['data']

    assert response.status_code == 200
    assert updated['name'] == 'Renamed'
    assert updated['destination'] == 'SF'
    assert updated['estimatedTime'] == '6h'


def test_update_rejects_too_many_stops(client, alice):
    trip = _create(client, alice)
    response = client.put(f"/api/trips/{trip['_id']}", json={'stops': _stops(6)}, headers=alice.headers)
    assert response.status_code == 400


def test_status_change(client, alice):
    trip = _create(client, alice)

    response = client.patch(f"/api/trips/{trip['_id']}/status", json={'status': 'completed'}, headers=alice.headers)
    assert response.status_code == 200
    assert response.get_json()['data']['status'] == 'completed'

    response = client.patch(f"/api/trips/{trip['_id']}/status", json={'status': 'archived'}, headers=alice.headers)
    assert response.status_code == 400


def test_list_is_scoped_to_owner_and_filterable(client, alice, bob):
    first = _create(client, alice, name='First')
    second = _create(client, alice, name='Second')
    _create(client, bob, name='Bob trip')
    client.patch(f"/api/trips/{first['_id']}/status", json={'status': 'planned'}, headers=alice.headers)

    body = client.get('/api/trips', headers=alice.headers).get_json()
    assert [t['_id'] for t in body['data']['trips']] == [second['_id'], first['_id']]
    assert body['data']['pagination'] == {'page': 1, 'limit': 50, 'total': 2, 'pages': 1}

    planned = client.get('/api/trips?status=planned', headers=alice.headers).get_json()
    assert [t['_id'] for t in planned['data']['trips']] == [first['_id']]

    # 허용되지 않은 status 값은 무시된다
    ignored = client.get('/api/trips?status=bogus', headers=alice.headers).get_json()
    assert len(ignored['data']['trips']) == 2


def test_delete_trip(client, alice):
    trip = _create(client, alice)

    assert client.delete(f"/api/trips/{trip['_id']}", headers=alice.headers).status_code == 200
    assert client.get(f"/api/trips/{trip['_id']}", headers=alice.headers).status_code == 404


def test_search_trips(client, alice, bob):
    _create(client, alice, name='Tokyo Food Tour', destination='Tokyo')
    _create(client, alice, name='Coastal Run')
    _create(client, bob, name='Tokyo Nights')

    body = client.get('/api/trips/search?q=tokyo', headers=alice.headers).get_json()

    assert body['count'] == 1
    assert body['data'][0]['name'] == 'Tokyo Food Tour'


def test_list_limit_over_maximum_is_capped(client, app, alice):
    app.config['MAX_PAGE_LIMIT'] = 1
    _create(client, alice, name='First')
    second = _create(client, alice, name='Second')

    response = client.get('/api/trips?limit=200', headers=alice.headers)

    assert response.status_code == 200
    body = response.get_json()['data']
    assert [t['_id'] for t in body['trips']] == [second['_id']]
    assert body['pagination'] == {'page': 1, 'limit': 1, 'total': 2, 'pages': 2}
