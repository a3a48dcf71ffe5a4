from chalicelib.constants import keys_structure, seed_data
from chalicelib.constants.status_codes import http200, http201, http204, http400, http404
from test.utils.request_utils import make_request, response_json

from test.utils.fixtures import chalice_client, store


def create_test_menu_item(chalice_client, **fields):
    menu_item_to_create = {
        'name': 'Tarte Tatin',
        'price': 520,
        'category': 'Dessert',
        **fields
    }
    response = make_request(chalice_client, endpoint='/menu', method='POST', json_body=menu_item_to_create)
    assert response.status_code == http201, f"status code not as expected"
    return response_json(response)


def test_get_menu_items(chalice_client):
    response = make_request(chalice_client, endpoint='/menu')

    response_body = response_json(response)
    assert response.status_code == http200, f"status code not as expected"
    assert [item['name'] for item in response_body] == [item['name'] for item in seed_data.MENU]
    for item in response_body:
        assert 'id' in item
        assert 'id_' not in item
        assert isinstance(item['createdAt'], int)


def test_create_menu_item(chalice_client, store):
    response_body = create_test_menu_item(chalice_client)

    assert response_body['name'] == 'Tarte Tatin'
    assert response_body['price'] == 520
    assert response_body['category'] == 'Dessert'
    assert response_body['image'] == seed_data.PLACEHOLDER_IMAGE

    db_record = store.get(keys_structure.menu_collection, response_body['id'])
    assert db_record['name'] == 'Tarte Tatin'


def test_create_menu_item_keeps_client_id_and_created_at(chalice_client):
    response_body = create_test_menu_item(chalice_client, id='local-1', createdAt=1_700_000_000_000,
                                          category=None)

    assert response_body['id'] == 'local-1'
    assert response_body['createdAt'] == 1_700_000_000_000
    assert response_body['category'] == seed_data.DEFAULT_CATEGORY

    menu = response_json(make_request(chalice_client, endpoint='/menu'))
    assert menu[-1]['id'] == 'local-1'


def test_create_menu_item_without_price(chalice_client):
    response = make_request(chalice_client, endpoint='/menu', method='POST', json_body={'name': 'Soup'})

    response_body = response_json(response)
    assert response.status_code == http400, f"status code not as expected"
    assert response_body['exception'] == 'MandatoryFieldsAreNotFilled'
    assert response_body['error'] == 'name and price are required'


def test_create_menu_item_with_wrong_price(chalice_client):
    for price in (-5, 0, 'cheap', True):
        response = make_request(chalice_client, endpoint='/menu', method='POST',
                                json_body={'name': 'Soup', 'price': price})
        assert response.status_code == http400, f"price={price!r} should be rejected"


def test_update_menu_item(chalice_client, store):
    menu_item = create_test_menu_item(chalice_client)

    fields_to_update = {'name': 'Tarte Tatin flambée', 'price': 610.5}
    wrong_fields_to_update = {'id': 'another-id', 'price_': 1, 'category': 42}
    response = make_request(chalice_client, endpoint='/menu', method='PUT', query=f"id={menu_item['id']}",
                            json_body={**fields_to_update, **wrong_fields_to_update})

    response_body = response_json(response)
    assert response.status_code == http200, f"status code not as expected"
    assert response_body['id'] == menu_item['id']
    assert response_body['name'] == 'Tarte Tatin flambée'
    assert response_body['price'] == 610.5
    assert response_body['category'] == 'Dessert'
    assert 'price_' not in response_body

    db_record = store.get(keys_structure.menu_collection, menu_item['id'])
    assert db_record['price'] == 610.5


def test_update_menu_item_requires_id(chalice_client):
    response = make_request(chalice_client, endpoint='/menu', method='PUT', json_body={'price': 10})

    assert response.status_code == http400
    assert response_json(response)['error'] == 'id query parameter is required'


def test_update_unknown_menu_item(chalice_client):
    response = make_request(chalice_client, endpoint='/menu', method='PUT', query='id=missing',
                            json_body={'price': 10})

    assert response.status_code == http404
    assert response_json(response)['exception'] == 'RecordNotFound'


def test_delete_menu_item(chalice_client, store):
    menu_item = create_test_menu_item(chalice_client)

    response = make_request(chalice_client, endpoint='/menu', method='DELETE', query=f"id={menu_item['id']}")
    assert response.status_code == http204, f"status code not as expected"
    assert not store.find(keys_structure.menu_collection, id_=menu_item['id'])

    response = make_request(chalice_client, endpoint='/menu', method='DELETE', query=f"id={menu_item['id']}")
    assert response.status_code == http404


def test_delete_menu_item_requires_id(chalice_client):
    response = make_request(chalice_client, endpoint='/menu', method='DELETE')
    assert response.status_code == http400

    response = make_request(chalice_client, endpoint='/menu', method='DELETE', query='id=')
    assert response.status_code == http400
