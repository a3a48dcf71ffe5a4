from chalicelib.constants.status_codes import http200, http400, http405
from test.utils.request_utils import make_request, response_json

from test.utils.fixtures import chalice_client, store


def test_index(chalice_client):
    response = make_request(chalice_client, endpoint='/health-check')
    assert response.status_code == http200
    assert response_json(response) == {'health': 'check'}


def test_method_not_allowed_lists_allowed_methods(chalice_client):
    response = make_request(chalice_client, endpoint='/menu', method='PATCH', json_body={'name': 'x'})

    assert response.status_code == http405, f"status code not as expected"
    assert response.headers['Allow'] == 'GET,POST,PUT,DELETE'
    assert 'PATCH' in response_json(response)['error']


def test_method_not_allowed_for_every_resource(chalice_client):
    expected = {
        ('/reviews', 'PUT'): 'GET,POST,DELETE',
        ('/reservations', 'PUT'): 'GET,POST,PATCH,DELETE',
        ('/sales', 'DELETE'): 'GET,POST',
        ('/users', 'PATCH'): 'GET,POST',
    }
    for (endpoint, method), allow in expected.items():
        response = make_request(chalice_client, endpoint=endpoint, method=method)
        assert response.status_code == http405, f"{method} {endpoint} should not be allowed"
        assert response.headers['Allow'] == allow


def test_invalid_json_body(chalice_client):
    response = make_request(chalice_client, endpoint='/menu', method='POST', raw_body=b'{not valid json')

    response_body = response_json(response)
    assert response.status_code == http400, f"status code not as expected"
    assert response_body['exception'] == 'InvalidJsonBody'
    assert response_body['level'] == 'warning'
    assert set(response_body) == {'error', 'exception', 'message', 'error_id', 'level'}


def test_json_body_must_be_an_object(chalice_client):
    response = make_request(chalice_client, endpoint='/reviews', method='POST', json_body=[1, 2, 3])

    assert response.status_code == http400
    assert response_json(response)['exception'] == 'InvalidJsonBody'
