import os
from uuid import uuid4

import boto3
import pytest

from chalicelib import store as store_module
from chalicelib.constants import keys_structure, seed_data
from chalicelib.store import InMemoryCollectionStore, DynamoCollectionStore, create_store, seed_demo_data
from chalicelib.utils import db
from chalicelib.utils.exceptions import DuplicateRecord, RecordNotFound, UnknownStoreBackend

menu = keys_structure.menu_collection


def test_in_memory_store_keeps_insertion_order():
    store = InMemoryCollectionStore()
    for id_ in ('b', 'a', 'c'):
        store.create(menu, {'id_': id_, 'name': id_})

    assert [record['id_'] for record in store.list(menu)] == ['b', 'a', 'c']


def test_in_memory_store_crud():
    store = InMemoryCollectionStore()
    store.create(menu, {'id_': 'a', 'name': 'Soup', 'price': 10})

    assert store.get(menu, 'a')['name'] == 'Soup'
    patched = store.patch(menu, 'a', {'price': 12, 'id_': 'b'})
    assert patched == {'id_': 'a', 'name': 'Soup', 'price': 12}
    assert store.find(menu, price=12) == [patched]

    store.delete(menu, 'a')
    assert store.is_empty(menu)
    with pytest.raises(RecordNotFound):
        store.get(menu, 'a')
    with pytest.raises(RecordNotFound):
        store.delete(menu, 'a')
    with pytest.raises(RecordNotFound):
        store.patch(menu, 'a', {'price': 1})


def test_in_memory_store_rejects_existing_id():
    store = InMemoryCollectionStore()
    store.create(menu, {'id_': 'a', 'name': 'Soup'})

    with pytest.raises(DuplicateRecord):
        store.create(menu, {'id_': 'a', 'name': 'Bread'})
    assert store.list(menu) == [{'id_': 'a', 'name': 'Soup'}]


def test_in_memory_store_returns_copies():
    store = InMemoryCollectionStore()
    record = {'id_': 'a', 'items': [1]}
    store.create(menu, record)
    record['items'].append(2)
    store.get(menu, 'a')['items'].append(3)

    assert store.get(menu, 'a')['items'] == [1]


def test_delete_all_touches_one_collection():
    store = InMemoryCollectionStore()
    store.create(keys_structure.reservations_collection, {'id_': 'r1'})
    store.create(menu, {'id_': 'm1'})

    store.delete_all(keys_structure.reservations_collection)

    assert store.is_empty(keys_structure.reservations_collection)
    assert not store.is_empty(menu)


def test_seed_demo_data_runs_once():
    store = InMemoryCollectionStore()
    seed_demo_data(store)
    seed_demo_data(store)

    assert [record['name'] for record in store.list(menu)] == [item['name'] for item in seed_data.MENU]
    assert len(store.list(keys_structure.users_collection)) == len(seed_data.USERS)


def test_create_store():
    assert isinstance(create_store('memory', seed=False), InMemoryCollectionStore)
    assert create_store('memory', seed=False).is_empty(menu)
    assert not create_store('MEMORY', seed=True).is_empty(menu)
    with pytest.raises(UnknownStoreBackend):
        create_store('redis')


def test_get_store_is_created_once(monkeypatch):
    monkeypatch.setenv('STORE_BACKEND', 'memory')
    monkeypatch.setenv('SEED_DEMO_DATA', 'false')
    store_module.set_store(None)
    try:
        store = store_module.get_store()
        assert store is store_module.get_store()
        assert store.is_empty(menu)
    finally:
        store_module.set_store(None)


@pytest.fixture
def dynamo_store(monkeypatch):
    if not os.environ.get('ENDPOINT_URL'):
        pytest.skip('ENDPOINT_URL of a local DynamoDB is not set')
    table_name = f'restora-test-{uuid4().hex[:8]}'
    monkeypatch.setenv('GEN_TABLE_NAME', table_name)
    monkeypatch.setattr(db, '_DB', None)
    dynamodb = boto3.resource('dynamodb', endpoint_url=os.environ['ENDPOINT_URL'])
    table = dynamodb.create_table(
        TableName=table_name,
        KeySchema=[{'AttributeName': 'partkey', 'KeyType': 'HASH'},
                   {'AttributeName': 'sortkey', 'KeyType': 'RANGE'}],
        AttributeDefinitions=[{'AttributeName': 'partkey', 'AttributeType': 'S'},
                              {'AttributeName': 'sortkey', 'AttributeType': 'S'}],
        BillingMode='PAY_PER_REQUEST'
    )
    table.wait_until_exists()
    yield DynamoCollectionStore()
    table.delete()


@pytest.mark.local_db_test
def test_dynamo_store_crud(dynamo_store):
    dynamo_store.create(menu, {'id_': 'b', 'name': 'Soup', 'price': 10.5, 'time': '19:00'})
    dynamo_store.create(menu, {'id_': 'a', 'name': 'Bread', 'price': 3})

    assert [record['id_'] for record in dynamo_store.list(menu)] == ['b', 'a']
    assert dynamo_store.get(menu, 'b') == {'id_': 'b', 'name': 'Soup', 'price': 10.5, 'time': '19:00'}

    patched = dynamo_store.patch(menu, 'b', {'name': 'Onion soup', 'time': '20:00'})
    assert patched['name'] == 'Onion soup'
    assert patched['time'] == '20:00'
    assert 'partkey' not in patched

    with pytest.raises(DuplicateRecord):
        dynamo_store.create(menu, {'id_': 'b', 'name': 'Bread'})
    assert dynamo_store.get(menu, 'b')['name'] == 'Onion soup'

    dynamo_store.delete(menu, 'b')
    with pytest.raises(RecordNotFound):
        dynamo_store.get(menu, 'b')

    dynamo_store.delete_all(menu)
    assert dynamo_store.is_empty(menu)
