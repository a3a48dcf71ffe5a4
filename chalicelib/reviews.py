from typing import List, Dict
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http204
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled, RecordNotFound
from chalicelib.utils.logger import logger, log_request

allowed_methods = ('GET', 'POST', 'DELETE')

UNKNOWN_ITEM_NAME = 'Unknown'


def to_int(value):
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return value


class Review(EntityBase):
    collection = keys_structure.reviews_collection
    missing_fields_message = 'itemId, rating, reviewerName and text are required'

    required_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'itemId': lambda x: isinstance(x, str),
        'rating': lambda x: isinstance(x, int) and not isinstance(x, bool) and 1 <= x <= 5,
        'reviewerName': lambda x: isinstance(x, str),
        'text': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'itemName': lambda x: isinstance(x, str),
        'timestamp': lambda x: isinstance(x, int)
    }

    def __init__(self, id_, store=None, **kwargs):
        EntityBase.__init__(self, id_, store)

        self.item_id: str = kwargs.get('itemId')
        self.item_name: str = kwargs.get('itemName')
        self.rating: int = to_int(kwargs.get('rating'))
        self.reviewer_name: str = kwargs.get('reviewerName')
        self.text: str = kwargs.get('text')
        self.timestamp: int = kwargs.get('timestamp') or utils_data.now_ms()
        self.record_type = 'review'

    @classmethod
    def init_request_create(cls, request):
        log_request(request)
        request_body = utils_data.parse_raw_body(request)
        id_ = request_body.get('id') or str(uuid4())
        kwargs = cls._init_kwargs(request_body)
        # the server clock orders reviews, a client timestamp is not trusted
        kwargs.pop('timestamp', None)
        return cls(id_=str(id_), **kwargs)

    @classmethod
    def init_request_by_id(cls, request):
        log_request(request)
        review_id = utils_data.get_query_id(request)
        if not review_id:
            raise MandatoryFieldsAreNotFilled('id query parameter is required')
        return cls(id_=review_id)

    def _resolve_item_name(self) -> str:
        try:
            return self.store.get(keys_structure.menu_collection, self.item_id).get('name') or UNKNOWN_ITEM_NAME
        except RecordNotFound:
            logger.info(f'_resolve_item_name ::: menu item {self.item_id=} does not exist')
            return UNKNOWN_ITEM_NAME

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_reviews(request) -> Response:
        log_request(request)
        reviews: List[Dict] = Review._list_ui()
        logger.info(f"endpoint_get_reviews ::: returning {len(reviews)} reviews")
        return Response(status_code=http200, body=reviews)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create_review(cls, request) -> Response:
        review = cls.init_request_create(request)
        if isinstance(review.item_id, str) and review.item_id:
            review.item_name = review._resolve_item_name()
        record = review._create_db_record()
        return Response(status_code=http201, body=cls._record_to_ui(record))

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_delete_review(cls, request) -> Response:
        cls.init_request_by_id(request)._delete_db_record()
        return Response(status_code=http204, body='')

    def _to_dict(self):
        return {
            'id_': self.id_,
            'itemId': self.item_id,
            'itemName': self.item_name,
            'rating': self.rating,
            'reviewerName': self.reviewer_name,
            'text': self.text,
            'timestamp': self.timestamp
        }
