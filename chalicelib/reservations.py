from typing import List, Dict
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http204
from chalicelib.reviews import to_int
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled, ValidationException
from chalicelib.utils.logger import logger, log_request

allowed_methods = ('GET', 'POST', 'PATCH', 'DELETE')

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'
STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


class Reservation(EntityBase):
    collection = keys_structure.reservations_collection
    missing_fields_message = 'name, phone, guests, date and time are required for a reservation'

    required_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'name': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'guests': lambda x: isinstance(x, int) and not isinstance(x, bool) and x > 0,
        'date': lambda x: isinstance(x, str),
        'time': lambda x: isinstance(x, str),
        'status': lambda x: x in STATUSES
    }

    mutable_fields_validation = {
        'status': lambda x: x in STATUSES
    }

    optional_fields_validation = {
        'occasion': lambda x: isinstance(x, str),
        'notes': lambda x: isinstance(x, str),
        'userEmail': lambda x: isinstance(x, str),
        'createdAt': lambda x: isinstance(x, int)
    }

    def __init__(self, id_, store=None, **kwargs):
        EntityBase.__init__(self, id_, store)

        self.name: str = kwargs.get('name')
        self.phone: str = kwargs.get('phone')
        self.guests: int = to_int(kwargs.get('guests'))
        self.date: str = kwargs.get('date')
        self.time: str = kwargs.get('time')
        self.occasion: str = kwargs.get('occasion') or ''
        self.notes: str = kwargs.get('notes') or ''
        self.user_email: str = kwargs.get('userEmail') or None
        self.created_at: int = kwargs.get('createdAt') or utils_data.now_ms()
        self.status: str = kwargs.get('status') or STATUS_PENDING
        self.record_type = 'reservation'

    @classmethod
    def init_request_create(cls, request):
        log_request(request)
        request_body = utils_data.parse_raw_body(request)
        id_ = request_body.get('id') or str(uuid4())
        kwargs = cls._init_kwargs(request_body)
        # every new reservation waits for an admin decision
        kwargs.pop('status', None)
        kwargs.pop('createdAt', None)
        return cls(id_=str(id_), **kwargs)

    @classmethod
    def init_request_by_id(cls, request, required=True):
        log_request(request)
        reservation_id = utils_data.get_query_id(request)
        # an empty ?id= is a bad request, only a missing id may mean "all reservations"
        if reservation_id == '' or (reservation_id is None and required):
            raise MandatoryFieldsAreNotFilled('id query parameter is required')
        return cls(id_=reservation_id)

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_reservations(request) -> Response:
        log_request(request)
        reservations: List[Dict] = Reservation._list_ui()
        logger.info(f"endpoint_get_reservations ::: returning {len(reservations)} reservations")
        return Response(status_code=http200, body=reservations)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create_reservation(cls, request) -> Response:
        record = cls.init_request_create(request)._create_db_record()
        return Response(status_code=http201, body=cls._record_to_ui(record))

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_update_status(cls, request) -> Response:
        reservation = cls.init_request_by_id(request)
        reservation.store.get(cls.collection, reservation.id_)
        status = utils_data.parse_raw_body(request).get('status')
        if status not in STATUSES:
            raise ValidationException(f'status must be {", ".join(STATUSES[:-1])} or {STATUSES[-1]}')
        record = reservation._update_db_record({'status': status})
        return Response(status_code=http200, body=cls._record_to_ui(record))

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_delete_reservations(cls, request) -> Response:
        """
        with ?id= deletes one reservation, without it clears all of them
        """
        reservation = cls.init_request_by_id(request, required=False)
        if reservation.id_ is None:
            reservation.store.delete_all(cls.collection)
            logger.info("endpoint_delete_reservations ::: all reservations were cleared")
        else:
            reservation._delete_db_record()
        return Response(status_code=http204, body='')

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name,
            'phone': self.phone,
            'guests': self.guests,
            'date': self.date,
            'time': self.time,
            'occasion': self.occasion,
            'notes': self.notes,
            'userEmail': self.user_email,
            'createdAt': self.created_at,
            'status': self.status
        }
