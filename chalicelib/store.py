"""
Collection stores behind the REST handlers.

Every entity kind (menu, reviews, reservations, sales, users) is a collection
of records keyed by ``id_``. Handlers only talk to the ``CollectionStore``
interface, the concrete store is picked by ``STORE_BACKEND``:

* ``memory`` (default) - process memory, lost on restart
* ``dynamodb`` - one generic table, ``partkey`` is the collection, ``sortkey`` the record id

There is no concurrency control in either store, the last write wins.
"""
import os
import time
from copy import deepcopy
from typing import Dict, List, Optional
from uuid import uuid4

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from chalicelib.constants import keys_structure, seed_data
from chalicelib.utils import db as utils_db
from chalicelib.utils.data import now_ms
from chalicelib.utils.exceptions import DuplicateRecord, RecordNotFound, UnknownStoreBackend
from chalicelib.utils.logger import logger


class CollectionStore:

    def list(self, collection: str) -> List[Dict]:
        raise NotImplementedError

    def get(self, collection: str, record_id: str) -> Dict:
        raise NotImplementedError

    def create(self, collection: str, record: Dict) -> Dict:
        raise NotImplementedError

    def patch(self, collection: str, record_id: str, patch: Dict) -> Dict:
        raise NotImplementedError

    def delete(self, collection: str, record_id: str) -> None:
        raise NotImplementedError

    def delete_all(self, collection: str) -> None:
        raise NotImplementedError

    def find(self, collection: str, **fields) -> List[Dict]:
        return [
            record for record in self.list(collection)
            if all(record.get(key) == value for key, value in fields.items())
        ]

    def is_empty(self, collection: str) -> bool:
        return not self.list(collection)


class InMemoryCollectionStore(CollectionStore):

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict]] = {name: {} for name in keys_structure.all_collections}

    def _collection(self, collection: str) -> Dict[str, Dict]:
        return self._collections.setdefault(collection, {})

    def list(self, collection: str) -> List[Dict]:
        return [deepcopy(record) for record in self._collection(collection).values()]

    def get(self, collection: str, record_id: str) -> Dict:
        try:
            return deepcopy(self._collection(collection)[record_id])
        except KeyError:
            raise RecordNotFound(f'record {collection=} {record_id=} not found')

    def create(self, collection: str, record: Dict) -> Dict:
        if record['id_'] in self._collection(collection):
            raise DuplicateRecord(f"record {collection=} id_={record['id_']} already exists")
        self._collection(collection)[record['id_']] = deepcopy(record)
        logger.debug(f"create ::: {collection=} id_={record['id_']}")
        return deepcopy(record)

    def patch(self, collection: str, record_id: str, patch: Dict) -> Dict:
        updated = {**self.get(collection, record_id), **patch, 'id_': record_id}
        self._collection(collection)[record_id] = updated
        return deepcopy(updated)

    def delete(self, collection: str, record_id: str) -> None:
        if self._collection(collection).pop(record_id, None) is None:
            raise RecordNotFound(f'record {collection=} {record_id=} not found')

    def delete_all(self, collection: str) -> None:
        self._collection(collection).clear()


class DynamoCollectionStore(CollectionStore):
    """
    Records are kept in the generic table, ordering on list follows ``seq_``
    (creation time in ns) to mimic insertion order.
    """
    service_keys = ('partkey', 'sortkey', 'seq_')

    @staticmethod
    def _key(collection: str, record_id: str) -> Dict:
        return {
            'partkey': keys_structure.collection_pk.format(collection=collection),
            'sortkey': keys_structure.collection_sk.format(record_id=record_id)
        }

    def _clean(self, item: Dict) -> Dict:
        record = utils_db.from_db_item(item)
        for key in self.service_keys:
            record.pop(key, None)
        return record

    def _items(self, collection: str) -> List[Dict]:
        items = utils_db.query_items_paged(
            Key('partkey').eq(keys_structure.collection_pk.format(collection=collection))
        )
        return sorted(items, key=lambda item: item.get('seq_', 0))

    def list(self, collection: str) -> List[Dict]:
        return [self._clean(item) for item in self._items(collection)]

    def get(self, collection: str, record_id: str) -> Dict:
        return self._clean(utils_db.get_db_item(**self._key(collection, record_id)))

    def create(self, collection: str, record: Dict) -> Dict:
        try:
            utils_db.put_db_record({**self._key(collection, record['id_']), 'seq_': time.time_ns(), **record},
                                   condition=Attr('sortkey').not_exists())
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') != 'ConditionalCheckFailedException':
                raise
            raise DuplicateRecord(f"record {collection=} id_={record['id_']} already exists")
        logger.debug(f"create ::: {collection=} id_={record['id_']}")
        return deepcopy(record)

    def patch(self, collection: str, record_id: str, patch: Dict) -> Dict:
        self.get(collection, record_id)
        update_body = {key: value for key, value in patch.items() if key != 'id_'}
        if not update_body:
            return self.get(collection, record_id)
        set_response = utils_db.update_db_record(
            key=self._key(collection, record_id),
            update_body=update_body,
            allowed_attrs_to_update=list(update_body.keys())
        )
        if set_response is None:
            return self.get(collection, record_id)
        return self._clean(set_response['Attributes'])

    def delete(self, collection: str, record_id: str) -> None:
        self.get(collection, record_id)
        utils_db.delete_db_record(self._key(collection, record_id))

    def delete_all(self, collection: str) -> None:
        for item in self._items(collection):
            utils_db.delete_db_record({'partkey': item['partkey'], 'sortkey': item['sortkey']})


def seed_demo_data(store: CollectionStore) -> None:
    if store.is_empty(keys_structure.menu_collection):
        for item in seed_data.MENU:
            store.create(keys_structure.menu_collection, {'id_': str(uuid4()), **item, 'createdAt': now_ms()})
    if store.is_empty(keys_structure.users_collection):
        for user in seed_data.USERS:
            store.create(keys_structure.users_collection,
                         {'id_': str(uuid4()), **user, 'favorites': [], 'avatarUrl': ''})
    logger.info('seed_demo_data ::: demo data is in place')


_STORE: Optional[CollectionStore] = None

store_backends = {
    'memory': InMemoryCollectionStore,
    'dynamodb': DynamoCollectionStore
}


def create_store(backend: str = None, seed: bool = None) -> CollectionStore:
    backend = (backend or os.environ.get('STORE_BACKEND', 'memory')).lower()
    if seed is None:
        seed = os.environ.get('SEED_DEMO_DATA', 'true').lower() != 'false'
    try:
        store = store_backends[backend]()
    except KeyError:
        raise UnknownStoreBackend(f'Unknown store backend {backend}, expected one of {list(store_backends)}')
    if seed:
        seed_demo_data(store)
    logger.info(f'create_store ::: {backend=} {seed=}')
    return store


def get_store() -> CollectionStore:
    global _STORE
    if _STORE is None:
        _STORE = create_store()
    return _STORE


def set_store(store: Optional[CollectionStore]) -> None:
    global _STORE
    _STORE = store
