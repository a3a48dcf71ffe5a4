from typing import List, Dict
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201
from chalicelib.constants.substitute_keys import users_from_db
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.exceptions import DuplicateRecord
from chalicelib.utils.logger import logger, log_request

allowed_methods = ('GET', 'POST')

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'


class User(EntityBase):
    """
    Demo user, the password is stored and compared as plain text.
    It never leaves the server: ``users_from_db`` drops it from every response.
    """
    collection = keys_structure.users_collection
    keys_from_db = users_from_db
    missing_fields_message = 'email, password and name are required'

    required_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'password': lambda x: isinstance(x, str),
        'name': lambda x: isinstance(x, str),
        'role': lambda x: x in (ROLE_USER, ROLE_ADMIN)
    }

    optional_fields_validation = {
        'favorites': lambda x: isinstance(x, list),
        'avatarUrl': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, store=None, **kwargs):
        EntityBase.__init__(self, id_, store)

        self.email: str = kwargs.get('email')
        self.password: str = kwargs.get('password')
        self.name: str = kwargs.get('name')
        self.role: str = kwargs.get('role') or ROLE_USER
        self.favorites: list = kwargs.get('favorites', [])
        self.avatar_url: str = kwargs.get('avatarUrl', '')
        self.record_type = 'user'

    @classmethod
    def init_request_create(cls, request):
        log_request(request)
        request_body = utils_data.parse_raw_body(request)
        return cls(id_=str(uuid4()), email=request_body.get('email'),
                   password=request_body.get('password'), name=request_body.get('name'))

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_users(request) -> Response:
        log_request(request)
        users: List[Dict] = User._list_ui()
        logger.info(f"endpoint_get_users ::: returning users={[user['id'] for user in users]}")
        return Response(status_code=http200, body=users)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create_user(cls, request) -> Response:
        user = cls.init_request_create(request)
        if user.email and user.store.find(cls.collection, email=user.email):
            raise DuplicateRecord('User already exists')
        record = user._create_db_record()
        return Response(status_code=http201, body=cls._record_to_ui(record))

    def _to_dict(self):
        return {
            'id_': self.id_,
            'email': self.email,
            'password': self.password,
            'name': self.name,
            'role': self.role,
            'favorites': self.favorites,
            'avatarUrl': self.avatar_url
        }
