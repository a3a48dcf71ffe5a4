import threading
import time
from urllib.parse import urlsplit

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

API_BASE = 'http://restora.test'


def build_response(request, status_code: int, content: bytes, headers=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    response._content = content
    response.url = request.url
    response.request = request
    response.encoding = 'utf-8'
    return response


class ChaliceServer:
    """
    The app behind ``chalice.test.Client`` as seen by every session of a test.
    ``offline`` makes every call fail like an unreachable server, ``delay`` slows every call down.
    """

    def __init__(self, chalice_client, delay: float = 0.0):
        self.chalice_client = chalice_client
        self.delay = delay
        self.offline = False
        self.requests = []
        self._lock = threading.Lock()

    def session(self) -> requests.Session:
        return mounted_session(ChaliceAdapter(self))

    def handle(self, request) -> requests.Response:
        url = urlsplit(request.url)
        path = f'{url.path}?{url.query}' if url.query else url.path
        body = request.body or b''
        if isinstance(body, str):
            body = body.encode()
        headers = dict(request.headers)
        headers.setdefault('Host', url.netloc)
        with self._lock:
            self.requests.append((request.method, path))
            result = self.chalice_client.http.request(method=request.method, path=path, headers=headers, body=body)
        return build_response(request, result.status_code, result.body, result.headers)


class ChaliceAdapter(BaseAdapter):
    """
    Sends ``requests`` traffic of one session to the ``ChaliceServer``, nothing is sent once it is closed.
    """

    def __init__(self, server: ChaliceServer):
        super(ChaliceAdapter, self).__init__()
        self.server = server
        self.closed = False

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        if self.server.offline:
            raise requests.ConnectionError(f'{request.url} is unreachable')
        if self.server.delay:
            time.sleep(self.server.delay)
        if self.closed:
            raise requests.ConnectionError(f'{request.url} connection closed before sending')
        return self.server.handle(request)

    def close(self):
        self.closed = True


class StaticAdapter(BaseAdapter):
    """
    Answers every request with the same status and body.
    """

    def __init__(self, status_code: int = 200, content: bytes = b'[]'):
        super(StaticAdapter, self).__init__()
        self.status_code = status_code
        self.content = content

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        return build_response(request, self.status_code, self.content)

    def close(self):
        pass


def mounted_session(adapter: BaseAdapter) -> requests.Session:
    session = requests.Session()
    session.mount(API_BASE, adapter)
    return session
