import asyncio
from functools import partial
from typing import Any, Callable, Optional, Set

import requests
from requests.exceptions import RequestException

from restora_client import constants
from restora_client.logger import ClientLogger, logger as default_logger


class RemoteAccessLayer:
    """
    HTTP calls to the Restora API bounded by a timeout.

    Every call resolves, it never raises: a non 2xx status, a timeout, a network
    failure or an undecodable body all resolve to ``fallback()`` (or None) and
    are logged as warnings. No retries.

    Each call runs on its own session from ``session_factory``. The session is
    closed when the call resolves, so a call that timed out has its transport
    closed as well and is not sent once the caller gave up on it.
    """

    def __init__(self, api_base: str = constants.API_BASE,
                 session_factory: Callable[[], requests.Session] = requests.Session,
                 read_timeout: float = constants.READ_TIMEOUT, write_timeout: float = constants.WRITE_TIMEOUT,
                 logger: ClientLogger = None):
        self.api_base = api_base.rstrip('/')
        self.session_factory = session_factory
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.logger = logger or default_logger
        self._sessions: Set[requests.Session] = set()

    async def get(self, path: str, fallback: Callable[[], Any] = None):
        return await self._call('GET', path, timeout=self.read_timeout, fallback=fallback)

    async def post(self, path: str, body, fallback: Callable[[], Any] = None):
        return await self._call('POST', path, body=body, timeout=self.write_timeout, fallback=fallback)

    async def put(self, path: str, body, fallback: Callable[[], Any] = None):
        return await self._call('PUT', path, body=body, timeout=self.write_timeout, fallback=fallback)

    async def patch(self, path: str, body, fallback: Callable[[], Any] = None):
        return await self._call('PATCH', path, body=body, timeout=self.write_timeout, fallback=fallback)

    async def delete(self, path: str, fallback: Callable[[], Any] = None):
        return await self._call('DELETE', path, timeout=self.read_timeout, fallback=fallback)

    def close(self):
        """ Closes the sessions of the calls still in flight """
        for session in list(self._sessions):
            session.close()
        self._sessions.clear()

    @staticmethod
    def _send(session, method, url, body, timeout):
        kwargs = {'timeout': timeout}
        if body is not None:
            kwargs['json'] = body
        return session.request(method, url, **kwargs)

    async def _call(self, method: str, path: str, timeout: float, body=None,
                    fallback: Optional[Callable[[], Any]] = None):
        url = f'{self.api_base}{path}'
        loop = asyncio.get_running_loop()
        session = self.session_factory()
        self._sessions.add(session)
        try:
            response = await asyncio.wait_for(
                loop.run_in_executor(None, partial(self._send, session, method, url, body, timeout)),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            self.logger.warning(f"RemoteAccessLayer._call ::: {method} {path} timed out after {timeout}s")
            return self._fallback(fallback)
        except RequestException as e:
            self.logger.warning(f"RemoteAccessLayer._call ::: {method} {path} failed: {e}")
            return self._fallback(fallback)
        finally:
            self._sessions.discard(session)
            session.close()

        if not 200 <= response.status_code < 300:
            self.logger.warning(f"RemoteAccessLayer._call ::: {method} {path} returned {response.status_code}")
            return self._fallback(fallback)
        if method == 'DELETE':
            return True
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            self.logger.warning(f"RemoteAccessLayer._call ::: {method} {path} returned a body that is not JSON: {e}")
            return self._fallback(fallback)

    @staticmethod
    def _fallback(fallback):
        return fallback() if fallback is not None else None
