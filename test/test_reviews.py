from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http204, http400, http404
from test.utils.request_utils import make_request, response_json

from test.utils.fixtures import chalice_client, store


def first_menu_item(store):
    return store.list(keys_structure.menu_collection)[0]


def review_body(item_id, **fields):
    return {
        'itemId': item_id,
        'rating': 5,
        'reviewerName': 'Camille',
        'text': 'Just like in Lyon',
        **fields
    }


def test_create_review(chalice_client, store):
    menu_item = first_menu_item(store)

    response = make_request(chalice_client, endpoint='/reviews', method='POST',
                            json_body=review_body(menu_item['id_'], id='review-1', timestamp=1))

    response_body = response_json(response)
    assert response.status_code == http201, f"status code not as expected"
    assert response_body['id'] == 'review-1'
    assert response_body['itemName'] == menu_item['name']
    assert response_body['rating'] == 5
    # the server clock orders reviews
    assert response_body['timestamp'] > 1

    reviews = response_json(make_request(chalice_client, endpoint='/reviews'))
    assert [review['id'] for review in reviews] == ['review-1']


def test_create_review_for_unknown_item(chalice_client):
    response = make_request(chalice_client, endpoint='/reviews', method='POST',
                            json_body=review_body('no-such-item', itemName='Forged name'))

    assert response.status_code == http201
    assert response_json(response)['itemName'] == 'Unknown'


def test_create_review_with_string_rating(chalice_client, store):
    response = make_request(chalice_client, endpoint='/reviews', method='POST',
                            json_body=review_body(first_menu_item(store)['id_'], rating='4'))

    assert response.status_code == http201
    assert response_json(response)['rating'] == 4


def test_create_review_with_wrong_rating(chalice_client, store):
    item_id = first_menu_item(store)['id_']
    for rating in (0, 6, 4.5, 'great'):
        response = make_request(chalice_client, endpoint='/reviews', method='POST',
                                json_body=review_body(item_id, rating=rating))
        assert response.status_code == http400, f"rating={rating!r} should be rejected"
        assert response_json(response)['exception'] == 'ValidationException'


def test_create_review_with_missing_fields(chalice_client, store):
    body = review_body(first_menu_item(store)['id_'])
    body.pop('text')
    response = make_request(chalice_client, endpoint='/reviews', method='POST', json_body=body)

    response_body = response_json(response)
    assert response.status_code == http400
    assert response_body['error'] == 'itemId, rating, reviewerName and text are required'
    assert not store.list(keys_structure.reviews_collection)


def test_delete_review(chalice_client, store):
    make_request(chalice_client, endpoint='/reviews', method='POST',
                 json_body=review_body(first_menu_item(store)['id_'], id='review-1'))

    response = make_request(chalice_client, endpoint='/reviews', method='DELETE', query='id=review-1')
    assert response.status_code == http204, f"status code not as expected"

    response = make_request(chalice_client, endpoint='/reviews')
    assert response.status_code == http200
    assert response_json(response) == []

    response = make_request(chalice_client, endpoint='/reviews', method='DELETE', query='id=review-1')
    assert response.status_code == http404


def test_delete_review_requires_id(chalice_client):
    response = make_request(chalice_client, endpoint='/reviews', method='DELETE')
    assert response.status_code == http400
