import asyncio
import inspect
from typing import Callable, Dict, List, Set

from restora_client import constants
from restora_client.logger import ClientLogger, logger as default_logger, log_exception


class SyncScheduler:
    """
    Named sync triggers on the running event loop.

    ``periodic`` fires every ``interval`` seconds, ``visible`` and ``focus`` fire
    after a debounce delay, ``after_mutation`` runs a callback once per burst of
    mutations with the same name. Retriggering a pending timer reschedules it.
    """

    def __init__(self, interval: float = constants.SYNC_INTERVAL,
                 debounce_delay: float = constants.DEBOUNCE_DELAY,
                 post_mutation_delay: float = constants.POST_MUTATION_DELAY,
                 logger: ClientLogger = None):
        self.interval = interval
        self.debounce_delay = debounce_delay
        self.post_mutation_delay = post_mutation_delay
        self.logger = logger or default_logger
        self.hidden = False
        self._callbacks: Dict[str, List[Callable]] = {trigger: [] for trigger in constants.TRIGGERS}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._tasks: Set[asyncio.Future] = set()
        self._periodic_task = None

    def register(self, trigger: str, callback: Callable):
        if trigger not in self._callbacks:
            raise ValueError(f'Unknown trigger {trigger}, expected one of {", ".join(constants.TRIGGERS)}')
        self._callbacks[trigger].append(callback)

    def start(self):
        if self._periodic_task is None:
            self._periodic_task = asyncio.ensure_future(self._run_periodic())

    async def _run_periodic(self):
        while True:
            await asyncio.sleep(self.interval)
            self.fire(constants.TRIGGER_PERIODIC)

    def fire(self, trigger: str):
        self.logger.debug(f"SyncScheduler.fire ::: {trigger}")
        for callback in self._callbacks[trigger]:
            self._invoke(callback)

    def _invoke(self, callback: Callable):
        result = callback()
        if inspect.isawaitable(result):
            self.spawn(result)

    def on_visibility_change(self, hidden: bool):
        self.hidden = hidden
        if not hidden:
            self._debounce(constants.TRIGGER_VISIBLE, self.debounce_delay,
                           lambda: self.fire(constants.TRIGGER_VISIBLE))

    def on_focus(self):
        self._debounce(constants.TRIGGER_FOCUS, self.debounce_delay,
                       lambda: self.fire(constants.TRIGGER_FOCUS))

    def after_mutation(self, name: str, callback: Callable):
        def run():
            self._invoke(callback)
            self.fire(constants.TRIGGER_POST_MUTATION)

        self._debounce(f'{constants.TRIGGER_POST_MUTATION}:{name}', self.post_mutation_delay, run)

    def _debounce(self, key: str, delay: float, callback: Callable):
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(delay, self._expire, key, callback)

    def _expire(self, key, callback):
        self._timers.pop(key, None)
        callback()

    def pending(self) -> List[str]:
        return list(self._timers)

    def spawn(self, awaitable) -> asyncio.Future:
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log_exception(error, "SyncScheduler._task_done ::: background task failed", level='error', log=self.logger)

    async def drain(self, poll: float = 0.05):
        """
        Waits until no background task is running and no debounce timer is pending.
        """
        while self._tasks or self._timers:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(poll)

    async def stop(self):
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        pending = list(self._tasks)
        if self._periodic_task is not None:
            pending.append(self._periodic_task)
            self._periodic_task = None
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
