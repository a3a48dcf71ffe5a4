import secrets
from typing import List, Dict

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.exceptions import ValidationException
from chalicelib.utils.logger import logger, log_request

allowed_methods = ('GET', 'POST')


class Sale(EntityBase):
    collection = keys_structure.sales_collection

    required_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'timestamp': lambda x: isinstance(x, int),
        'total': utils_data.is_number,
        'items': lambda x: isinstance(x, list)
    }

    def __init__(self, id_, store=None, **kwargs):
        EntityBase.__init__(self, id_, store)

        self.timestamp: int = kwargs.get('timestamp') or utils_data.now_ms()
        self.total = kwargs.get('total')
        self.items: list = kwargs.get('items')
        self.record_type = 'sale'

    @classmethod
    def init_request_create(cls, request):
        log_request(request)
        request_body = utils_data.parse_raw_body(request)
        if not isinstance(request_body.get('items'), list) or not utils_data.is_number(request_body.get('total')):
            raise ValidationException('items (array) and total (number) are required')
        timestamp = utils_data.now_ms()
        return cls(id_=f'{timestamp}-{secrets.token_hex(6)}', timestamp=timestamp,
                   total=request_body['total'], items=request_body['items'])

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_sales(request) -> Response:
        log_request(request)
        sales: List[Dict] = Sale._list_ui()
        logger.info(f"endpoint_get_sales ::: returning {len(sales)} sales")
        return Response(status_code=http200, body=sales)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create_sale(cls, request) -> Response:
        record = cls.init_request_create(request)._create_db_record()
        return Response(status_code=http201, body=cls._record_to_ui(record))

    def _to_dict(self):
        return {
            'id_': self.id_,
            'timestamp': self.timestamp,
            'total': self.total,
            'items': self.items
        }
