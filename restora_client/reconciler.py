import inspect
import time
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from restora_client import constants
from restora_client.exceptions import RecordNotFound
from restora_client.logger import ClientLogger, logger as default_logger, log_exception
from restora_client.remote import RemoteAccessLayer
from restora_client.storage import LocalCache


class Policy(Enum):
    REPLACE_WITH_REMOTE = 'replace_with_remote'
    UNION_MERGE = 'union_merge'
    WRITE_THROUGH = 'write_through'


def now_ms() -> int:
    return int(time.time() * 1000)


def default_id(record: Dict):
    return record.get('id')


class Reconciler:
    """
    Keeps one entity kind of the local cache converging with the server collection.

    - ``REPLACE_WITH_REMOTE``: the server snapshot wins, except local records created
      less than ``grace_window`` seconds ago which the server may not have seen yet.
    - ``UNION_MERGE``: records are keyed by id, the local version wins, nothing is dropped.
    - ``WRITE_THROUGH``: local writes are pushed, nothing is pulled.

    Renders are skipped when the fingerprint (ids plus ``fingerprint_fields`` in
    order) did not change since the last render.
    """

    def __init__(self, kind: str, cache: LocalCache, remote: RemoteAccessLayer, policy: Policy,
                 storage_key: str = None, path: str = None,
                 id_getter: Callable[[Dict], Any] = default_id,
                 order_by: Optional[str] = None,
                 created_field: Optional[str] = None,
                 grace_window: float = constants.GRACE_WINDOW,
                 fingerprint_fields: Iterable[str] = (),
                 renderer: Optional[Callable[[List[Dict]], Any]] = None,
                 clock: Callable[[], int] = now_ms,
                 spawn: Optional[Callable] = None,
                 logger: ClientLogger = None):
        self.kind = kind
        self.cache = cache
        self.remote = remote
        self.policy = policy
        self.storage_key = storage_key or constants.STORAGE_KEYS[kind]
        self.path = path or constants.PATHS[kind]
        self.id_getter = id_getter
        self.order_by = order_by
        self.created_field = created_field
        self.grace_window = grace_window
        self.fingerprint_fields = tuple(fingerprint_fields)
        self.renderer = renderer
        self.clock = clock
        self.spawn = spawn
        self.logger = logger or default_logger

        self.render_count = 0
        self._last_fingerprint = None
        self._syncing = False
        self._rendering = False

    # reading
    def read_local(self) -> List[Dict]:
        return self.cache.read(self.storage_key)

    async def read_remote(self) -> Optional[List[Dict]]:
        records = await self.remote.get(self.path)
        if not isinstance(records, list):
            self.logger.debug(f"Reconciler.read_remote ::: no data for {self.kind}")
            return None
        return records

    # merging
    def merge(self, local: List[Dict], remote: List[Dict], now: int = None, policy: Policy = None) -> List[Dict]:
        policy = policy or self.policy
        now = self.clock() if now is None else now

        if policy is Policy.WRITE_THROUGH:
            return list(local)

        remote_ids = {self.id_getter(record) for record in remote}
        local_only = [record for record in local if self.id_getter(record) not in remote_ids]

        if policy is Policy.REPLACE_WITH_REMOTE:
            merged = list(remote) + [record for record in local_only if self._within_grace(record, now)]
        elif policy is Policy.UNION_MERGE:
            local_by_id = {self.id_getter(record): record for record in local}
            merged = [local_by_id.get(self.id_getter(record), record) for record in remote] + local_only
        else:
            raise ValueError(f'Unknown policy {policy}')

        return self._order(self._dedupe(merged))

    def _within_grace(self, record: Dict, now: int) -> bool:
        if not self.created_field:
            return False
        created = record.get(self.created_field)
        if not isinstance(created, (int, float)) or isinstance(created, bool):
            return False
        return now - created < self.grace_window * 1000

    def _dedupe(self, records: List[Dict]) -> List[Dict]:
        seen = set()
        result = []
        for record in records:
            record_id = self.id_getter(record)
            if record_id is not None:
                if record_id in seen:
                    continue
                seen.add(record_id)
            result.append(record)
        return result

    def _order(self, records: List[Dict]) -> List[Dict]:
        if not self.order_by:
            return records
        return sorted(records, key=lambda record: record.get(self.order_by) or 0, reverse=True)

    def _changed(self, local: List[Dict], merged: List[Dict], policy: Policy) -> bool:
        if policy is Policy.UNION_MERGE:
            return {self.id_getter(r) for r in local} != {self.id_getter(r) for r in merged}
        return local != merged

    # reconciliation pass
    async def sync(self, policy: Policy = None) -> bool:
        """
        One reconciliation pass. Returns False when the pass was dropped (another one
        is in flight or the policy does not pull) or the server had no data.
        """
        policy = policy or self.policy
        if policy is Policy.WRITE_THROUGH:
            return False
        if self._syncing:
            self.logger.debug(f"Reconciler.sync ::: {self.kind} pass already in flight, dropping trigger")
            return False

        self._syncing = True
        try:
            remote = await self.read_remote()
            if remote is None:
                return False
            local = self.read_local()
            merged = self.merge(local, remote, self.clock(), policy=policy)
            if self._changed(local, merged, policy):
                self.cache.write(self.storage_key, merged)
                self.logger.info(f"Reconciler.sync ::: {self.kind} updated, {len(local)} -> {len(merged)} records")
            await self.render()
            return True
        except Exception as e:
            log_exception(e, f"Reconciler.sync ::: {self.kind} pass failed", level='error', log=self.logger)
            return False
        finally:
            self._syncing = False

    # rendering
    def fingerprint(self, records: List[Dict]) -> List[list]:
        return [[self.id_getter(record)] + [record.get(field) for field in self.fingerprint_fields]
                for record in records]

    def invalidate(self):
        self._last_fingerprint = None

    async def render(self, force: bool = False) -> bool:
        if self.renderer is None or self._rendering:
            return False
        records = self.read_local()
        fingerprint = self.fingerprint(records)
        if not force and fingerprint == self._last_fingerprint:
            return False

        self._rendering = True
        try:
            result = self.renderer(records)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log_exception(e, f"Reconciler.render ::: {self.kind} renderer failed", level='error', log=self.logger)
            return False
        finally:
            self._rendering = False
        self._last_fingerprint = fingerprint
        self.render_count += 1
        return True

    # local writes
    async def write_local(self, records: List[Dict]) -> List[Dict]:
        records = list(records)
        self.cache.write(self.storage_key, records)
        await self.render()
        return records

    async def write_through(self, records: List[Dict], push: Callable = None) -> List[Dict]:
        """
        Writes locally and renders first, then runs ``push()`` (a coroutine function
        calling the server) in the background. A failed push keeps the local write.
        """
        records = await self.write_local(records)
        if push is not None:
            if self.spawn is not None:
                self.spawn(push())
            else:
                await push()
        return records

    def find(self, record_id) -> Optional[Dict]:
        for record in self.read_local():
            if self.id_getter(record) == record_id:
                return record
        return None

    async def upsert(self, record: Dict, push: Callable = None) -> Dict:
        record_id = self.id_getter(record)
        records = self.read_local()
        for index, existing in enumerate(records):
            if self.id_getter(existing) == record_id:
                records[index] = record
                break
        else:
            records.append(record)
        await self.write_through(self._order(records), push)
        return record

    async def update_record(self, record_id, changes: Dict, push: Callable = None) -> Dict:
        records = self.read_local()
        for index, existing in enumerate(records):
            if self.id_getter(existing) == record_id:
                records[index] = {**existing, **changes}
                await self.write_through(records, push)
                return records[index]
        raise RecordNotFound(f'{self.kind} record {record_id} was not found')

    async def remove(self, record_id, push: Callable = None) -> Dict:
        records = self.read_local()
        remaining = [record for record in records if self.id_getter(record) != record_id]
        if len(remaining) == len(records):
            raise RecordNotFound(f'{self.kind} record {record_id} was not found')
        await self.write_through(remaining, push)
        return next(record for record in records if self.id_getter(record) == record_id)
