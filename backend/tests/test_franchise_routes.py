"""
Franchise and store API tests.

Verifies:
- Public listing shape, paging and name filter
- Franchise create/delete are global-admin only
- Franchise admins manage stores of their own franchise only
- Deleting a franchise cascades stores and franchisee roles
"""

import pytest

from conftest import auth_headers, get_auth_token
from pizza_service.models import Store, UserRole


@pytest.fixture
def franchisee(make_user):
    return make_user(name="pizza franchisee", password="franchisee")


@pytest.fixture
def franchisee_headers(client, franchisee):
    return auth_headers(get_auth_token(client, franchisee['email'], franchisee['password']))


@pytest.fixture
def franchise(client, admin_headers, franchisee):
    """pizzaPocket, administered by the franchisee fixture."""
    response = client.post(
        '/api/franchise',
        json={'name': 'pizzaPocket', 'admins': [{'email': franchisee['email']}]},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.get_json()
    return response.get_json()


def create_store(client, headers, franchise_id, name='SLC'):
    return client.post(f'/api/franchise/{franchise_id}/store', json={'name': name}, headers=headers)


class TestListFranchises:

    def test_empty_listing_shape(self, client):
        response = client.get('/api/franchise')

        assert response.status_code == 200
        assert response.get_json() == {'franchises': [], 'more': False}

    def test_public_listing_hides_admins_and_revenue(self, client, franchise, admin_headers):
        create_store(client, admin_headers, franchise['id'])

        data = client.get('/api/franchise').get_json()
        listed = data['franchises'][0]
        assert listed['name'] == 'pizzaPocket'
        assert 'admins' not in listed
        assert listed['stores'][0] == {'id': listed['stores'][0]['id'], 'name': 'SLC'}

    def test_admin_listing_includes_admins(self, client, franchise, franchisee, admin_headers):
        create_store(client, admin_headers, franchise['id'])

        listed = client.get('/api/franchise', headers=admin_headers).get_json()['franchises'][0]
        assert [admin['email'] for admin in listed['admins']] == [franchisee['email']]
        assert listed['stores'][0]['totalRevenue'] == 0

    def test_paging_and_name_filter(self, client, admin_headers):
        for name in ('alpha', 'alphabet', 'beta'):
            assert client.post('/api/franchise', json={'name': name, 'admins': []}, headers=admin_headers).status_code == 200

        first = client.get('/api/franchise?page=0&limit=2').get_json()
        assert len(first['franchises']) == 2
        assert first['more'] is True

        second = client.get('/api/franchise?page=1&limit=2').get_json()
        assert [f['name'] for f in second['franchises']] == ['beta']
        assert second['more'] is False

        filtered = client.get('/api/franchise?name=alpha*').get_json()
        assert [f['name'] for f in filtered['franchises']] == ['alpha', 'alphabet']


class TestUserFranchises:

    def test_franchisee_sees_own(self, client, franchise, franchisee, franchisee_headers):
        response = client.get(f"/api/franchise/{franchisee['id']}", headers=franchisee_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert [f['id'] for f in data] == [franchise['id']]
        assert data[0]['admins'][0]['email'] == franchisee['email']

    def test_other_user_sees_nothing(self, client, franchise, franchisee, diner_headers):
        response = client.get(f"/api/franchise/{franchisee['id']}", headers=diner_headers)

        assert response.status_code == 200
        assert response.get_json() == []

    def test_admin_sees_any_user(self, client, franchise, franchisee, admin_headers):
        data = client.get(f"/api/franchise/{franchisee['id']}", headers=admin_headers).get_json()
        assert [f['name'] for f in data] == ['pizzaPocket']

    def test_diner_has_no_franchises(self, client, diner_user, diner_headers):
        assert client.get(f"/api/franchise/{diner_user['id']}", headers=diner_headers).get_json() == []


class TestCreateFranchise:

    def test_admin_creates_franchise(self, client, franchise, franchisee):
        assert franchise['name'] == 'pizzaPocket'
        assert franchise['admins'] == [
            {'id': franchisee['id'], 'name': franchisee['name'], 'email': franchisee['email']}
        ]

    def test_franchisee_role_granted(self, client, franchise, franchisee_headers):
        roles = client.get('/api/user/me', headers=franchisee_headers).get_json()['roles']
        assert {'role': 'franchisee', 'objectId': franchise['id']} in roles

    def test_non_admin_forbidden(self, client, diner_headers):
        response = client.post('/api/franchise', json={'name': 'nope', 'admins': []}, headers=diner_headers)
        assert response.status_code == 403

    def test_unknown_admin_email(self, client, admin_headers):
        response = client.post(
            '/api/franchise',
            json={'name': 'ghosts', 'admins': [{'email': 'nobody@test.com'}]},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert 'nobody@test.com' in response.get_json()['message']
        assert client.get('/api/franchise?name=ghosts').get_json()['franchises'] == []

    def test_duplicate_name_conflicts(self, client, franchise, admin_headers):
        response = client.post('/api/franchise', json={'name': 'pizzaPocket', 'admins': []}, headers=admin_headers)
        assert response.status_code == 409

    def test_missing_name(self, client, admin_headers):
        response = client.post('/api/franchise', json={'admins': []}, headers=admin_headers)
        assert response.status_code == 400


class TestStores:

    def test_franchise_admin_creates_store(self, client, franchise, franchisee_headers):
        response = create_store(client, franchisee_headers, franchise['id'])

        assert response.status_code == 200
        data = response.get_json()
        assert data['name'] == 'SLC'
        assert data['totalRevenue'] == 0
        assert isinstance(data['id'], int)

    def test_global_admin_creates_store(self, client, franchise, admin_headers):
        assert create_store(client, admin_headers, franchise['id']).status_code == 200

    def test_outsider_cannot_create_store(self, client, franchise, diner_headers):
        response = create_store(client, diner_headers, franchise['id'])
        assert response.status_code == 403

    def test_admin_of_other_franchise_cannot_create_store(self, client, franchise, admin_headers, make_user):
        rival = make_user(name="rival", password="r")
        client.post('/api/franchise', json={'name': 'rivals', 'admins': [{'email': rival['email']}]}, headers=admin_headers)
        rival_headers = auth_headers(get_auth_token(client, rival['email'], 'r'))

        assert create_store(client, rival_headers, franchise['id']).status_code == 403

    def test_store_on_unknown_franchise(self, client, admin_headers):
        assert create_store(client, admin_headers, 999999).status_code == 404

    def test_store_name_required(self, client, franchise, admin_headers):
        response = client.post(f"/api/franchise/{franchise['id']}/store", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_franchise_admin_deletes_store(self, client, franchise, franchisee_headers):
        store = create_store(client, franchisee_headers, franchise['id']).get_json()

        response = client.delete(f"/api/franchise/{franchise['id']}/store/{store['id']}", headers=franchisee_headers)
        assert response.status_code == 200
        assert response.get_json() == {'message': 'store deleted'}
        assert client.get('/api/franchise').get_json()['franchises'][0]['stores'] == []

    def test_outsider_cannot_delete_store(self, client, franchise, franchisee_headers, diner_headers):
        store = create_store(client, franchisee_headers, franchise['id']).get_json()

        response = client.delete(f"/api/franchise/{franchise['id']}/store/{store['id']}", headers=diner_headers)
        assert response.status_code == 403
        assert len(client.get('/api/franchise').get_json()['franchises'][0]['stores']) == 1

    def test_delete_unknown_store(self, client, franchise, admin_headers):
        response = client.delete(f"/api/franchise/{franchise['id']}/store/999999", headers=admin_headers)
        assert response.status_code == 404


class TestDeleteFranchise:

    def test_admin_deletes_franchise_with_cascade(self, client, db_session, franchise, admin_headers, franchisee_headers):
        create_store(client, admin_headers, franchise['id'])

        response = client.delete(f"/api/franchise/{franchise['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json() == {'message': 'franchise deleted'}

        assert db_session.query(Store).filter_by(franchise_id=franchise['id']).count() == 0
        assert db_session.query(UserRole).filter_by(role='franchisee', object_id=franchise['id']).count() == 0

        roles = client.get('/api/user/me', headers=franchisee_headers).get_json()['roles']
        assert roles == [{'role': 'diner'}]

    def test_franchisee_cannot_delete_franchise(self, client, franchise, franchisee_headers):
        response = client.delete(f"/api/franchise/{franchise['id']}", headers=franchisee_headers)
        assert response.status_code == 403

    def test_delete_unknown_franchise(self, client, admin_headers):
        assert client.delete('/api/franchise/999999', headers=admin_headers).status_code == 404
