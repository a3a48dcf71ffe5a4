import json
import time
from typing import Optional

from chalicelib.utils.exceptions import InvalidJsonBody


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def parse_raw_body(chalice_request) -> dict:
    request_raw_body = chalice_request.raw_body
    if not request_raw_body:
        return {}
    try:
        item = json.loads(request_raw_body)
    except ValueError:
        raise InvalidJsonBody('Invalid JSON body')
    if not isinstance(item, dict):
        raise InvalidJsonBody('JSON body must be an object')
    return cleanup_dict(item, [None])


def get_query_id(chalice_request) -> Optional[str]:
    """ None when the id parameter is absent, an empty ?id= comes back as '' """
    query_params = chalice_request.query_params or {}
    return query_params.get('id')


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove None fields in dict with. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def now_ms() -> int:
    return int(time.time() * 1000)


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
