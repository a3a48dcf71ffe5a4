from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http400, http409
from test.utils.request_utils import make_request, response_json

from test.utils.fixtures import chalice_client, store


def test_get_users(chalice_client):
    response = make_request(chalice_client, endpoint='/users')

    response_body = response_json(response)
    assert response.status_code == http200, f"status code not as expected"
    assert {user['email'] for user in response_body} == {'123@gmail.com', 'admin@gmail.com'}
    for user in response_body:
        assert 'password' not in user
        assert 'id' in user
    assert {user['email']: user['role'] for user in response_body}['admin@gmail.com'] == 'admin'


def test_create_user(chalice_client, store):
    user_to_create = {'email': 'marie@example.com', 'password': 'secret', 'name': 'Marie', 'role': 'admin'}
    response = make_request(chalice_client, endpoint='/users', method='POST', json_body=user_to_create)

    response_body = response_json(response)
    assert response.status_code == http201, f"status code not as expected"
    assert response_body['email'] == 'marie@example.com'
    assert response_body['role'] == 'user'
    assert response_body['favorites'] == []
    assert 'password' not in response_body

    db_record = store.find(keys_structure.users_collection, email='marie@example.com')[0]
    assert db_record['password'] == 'secret'


def test_create_existing_user(chalice_client, store):
    response = make_request(chalice_client, endpoint='/users', method='POST',
                            json_body={'email': '123@gmail.com', 'password': 'x', 'name': 'Again'})

    assert response.status_code == http409
    assert response_json(response)['error'] == 'User already exists'
    assert len(store.find(keys_structure.users_collection, email='123@gmail.com')) == 1


def test_create_user_with_missing_fields(chalice_client):
    response = make_request(chalice_client, endpoint='/users', method='POST',
                            json_body={'email': 'marie@example.com', 'password': 'secret'})

    assert response.status_code == http400
    assert response_json(response)['error'] == 'email, password and name are required'
