from typing import List, Dict
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure, seed_data
from chalicelib.constants.status_codes import http200, http201, http204
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled
from chalicelib.utils.logger import logger, log_request

allowed_methods = ('GET', 'POST', 'PUT', 'DELETE')


def is_positive_number(value) -> bool:
    return utils_data.is_number(value) and value > 0


class MenuItem(EntityBase):
    collection = keys_structure.menu_collection
    missing_fields_message = 'name and price are required'

    required_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'name': lambda x: isinstance(x, str) and bool(x.strip()),
        'price': is_positive_number
    }

    mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and bool(x.strip()),
        'price': is_positive_number,
        'image': lambda x: isinstance(x, str),
        'category': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'image': lambda x: isinstance(x, str),
        'category': lambda x: isinstance(x, str),
        'createdAt': lambda x: isinstance(x, int)
    }

    def __init__(self, id_, store=None, **kwargs):
        EntityBase.__init__(self, id_, store)

        self.name: str = kwargs.get('name')
        self.price = kwargs.get('price')
        self.image: str = kwargs.get('image') or seed_data.PLACEHOLDER_IMAGE
        self.category: str = kwargs.get('category') or seed_data.DEFAULT_CATEGORY
        self.created_at: int = kwargs.get('createdAt') or utils_data.now_ms()
        self.record_type = 'menu_item'

    @classmethod
    def init_request_create(cls, request):
        log_request(request)
        request_body = utils_data.parse_raw_body(request)
        id_ = request_body.get('id') or str(uuid4())
        return cls(id_=str(id_), **cls._init_kwargs(request_body))

    @classmethod
    def init_request_by_id(cls, request):
        log_request(request)
        menu_item_id = utils_data.get_query_id(request)
        if not menu_item_id:
            raise MandatoryFieldsAreNotFilled('id query parameter is required')
        return cls(id_=menu_item_id)

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_menu_items(request) -> Response:
        log_request(request)
        menu_items: List[Dict] = MenuItem._list_ui()
        logger.info(f"endpoint_get_menu_items ::: returning menu items={[item['id'] for item in menu_items]}")
        return Response(status_code=http200, body=menu_items)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create_menu_item(cls, request) -> Response:
        record = cls.init_request_create(request)._create_db_record()
        return Response(status_code=http201, body=cls._record_to_ui(record))

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_update_menu_item(cls, request) -> Response:
        menu_item = cls.init_request_by_id(request)
        request_body = utils_data.parse_raw_body(request)
        request_body.pop('id', None)
        record = menu_item._update_db_record(request_body)
        return Response(status_code=http200, body=cls._record_to_ui(record))

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_delete_menu_item(cls, request) -> Response:
        cls.init_request_by_id(request)._delete_db_record()
        return Response(status_code=http204, body='')

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name.strip() if isinstance(self.name, str) else self.name,
            'price': self.price,
            'image': self.image,
            'category': self.category,
            'createdAt': self.created_at
        }
