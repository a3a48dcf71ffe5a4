import json
import os
from typing import Dict, List, Optional

from restora_client.logger import logger, log_exception


class Storage:
    """
    Key/value scope holding serialized strings, mirrors the browser storage API.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str):
        raise NotImplementedError

    def remove_item(self, key: str):
        raise NotImplementedError


class MemoryStorage(Storage):
    """
    Lives as long as the client, used as the session scope.
    """

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key):
        return self._items.get(key)

    def set_item(self, key, value):
        self._items[key] = str(value)

    def remove_item(self, key):
        self._items.pop(key, None)


class FileStorage(Storage):
    """
    Durable scope, one file per key inside ``directory``.
    """

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key):
        return os.path.join(self.directory, f'{key}.json')

    def get_item(self, key):
        try:
            with open(self._path(key), encoding='utf-8') as file:
                return file.read()
        except FileNotFoundError:
            return None

    def set_item(self, key, value):
        tmp_path = f'{self._path(key)}.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as file:
            file.write(str(value))
        os.replace(tmp_path, self._path(key))

    def remove_item(self, key):
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


class LocalCache:
    """
    JSON arrays per storage key. Reading never raises: a missing key, corrupt
    JSON or a non-array value reads as an empty list.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def read(self, key: str) -> List[Dict]:
        raw = self.storage.get_item(key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except ValueError as e:
            log_exception(e, f"LocalCache.read ::: corrupt value under {key}, treating it as empty")
            return []
        if not isinstance(records, list):
            logger.warning(f"LocalCache.read ::: value under {key} is not an array, treating it as empty")
            return []
        return records

    def write(self, key: str, records: List[Dict]):
        self.storage.set_item(key, json.dumps(list(records)))

    def read_record(self, key: str) -> Optional[Dict]:
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            record = json.loads(raw)
        except ValueError as e:
            log_exception(e, f"LocalCache.read_record ::: corrupt value under {key}")
            return None
        return record if isinstance(record, dict) else None

    def write_record(self, key: str, record: Dict):
        self.storage.set_item(key, json.dumps(record))

    def remove(self, key: str):
        self.storage.remove_item(key)
