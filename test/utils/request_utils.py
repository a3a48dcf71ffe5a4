import json
from typing import Optional


def make_request(chalice_client, endpoint: str = '/', method: str = 'GET',
                 query: Optional[str] = None, json_body=None, raw_body: Optional[bytes] = None):
    """Request to the app through the in-process gateway"""
    if raw_body is None:
        raw_body = json.dumps(json_body).encode() if json_body is not None else b''
    return chalice_client.http.request(
        method=method,
        path=f"{endpoint}?{query}" if query else f"{endpoint}",
        headers={'Content-Type': 'application/json', 'Host': 'test-domain.com'},
        body=raw_body
    )


def response_json(response):
    return json.loads(response.body)
