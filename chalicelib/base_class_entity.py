from typing import Dict, List, Any

from chalicelib.constants.substitute_keys import from_db
from chalicelib.store import CollectionStore, get_store
from chalicelib.utils.data import substitute_keys
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled, ValidationException
from chalicelib.utils.logger import logger


class EntityBase:
    collection = None
    keys_from_db = from_db

    required_fields_validation = {}
    mutable_fields_validation = {}
    optional_fields_validation = {}

    missing_fields_message = None

    def __init__(self, id_, store: CollectionStore = None):
        self.id_: str = id_
        self.record_type: str = ''
        self.store: CollectionStore = store or get_store()
        self.db_record: Dict[str, Any] = {}

    @staticmethod
    def _init_kwargs(request_body: Dict) -> Dict:
        return {key: value for key, value in request_body.items() if key not in ('id', 'id_', 'store')}

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_
        }

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        self.db_record = self._to_dict()

    @staticmethod
    def raise_validation_error(key):
        message = f'Validation error occurred while validating field={key}'
        logger.warning(f"raise_validation_error ::: {message}")
        raise ValidationException(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise MandatoryFieldsAreNotFilled if a field is missing,
        ValidationException in case if a field is not valid
        :return:
        None
        """
        missing = [key for key in self.required_fields_validation if self.db_record.get(key) in (None, '')]
        if missing:
            message = self.missing_fields_message or f'Mandatory fields are not filled: {missing}'
            logger.warning(f"_validate_mandatory_fields ::: {missing=}")
            raise MandatoryFieldsAreNotFilled(message)
        for key, validator_func in self.required_fields_validation.items():
            if validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _validate_optional_fields(self):
        """
        Validates optional fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in self.optional_fields_validation.items():
            if self.db_record.get(key) is not None and validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _get_validated_update_dict(self, update_dict: Dict) -> Dict:
        """
        Validates fields for update
        Delete field if it is not valid
        :return:
        Clean dict for update
        (all invalid fields will be automatically excluded)
        """
        clean_dict = {}
        for key, value in update_dict.items():
            if key in self.mutable_fields_validation and self.mutable_fields_validation[key](value) is True:
                clean_dict[key] = value
            else:
                logger.warning(f'_get_validated_update_dict ::: {key=}, {value=} is not valid, '
                               f'removing from update dict..')
        return clean_dict

    def _create_db_record(self) -> Dict:
        """
        Creates entity db record
        :return:
        created record
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        record = self.store.create(self.collection, self.db_record)
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} successfully created")
        return record

    def _update_db_record(self, update_dict: Dict) -> Dict:
        """
        Updates entity db record, the id is never updated
        :return:
        updated record
        """
        clean_dict = self._get_validated_update_dict(update_dict)
        record = self.store.patch(self.collection, self.id_, clean_dict)
        logger.info(f"_update_db_record ::: {self.record_type=} {self.id_=} "
                    f"fields={list(clean_dict.keys())} successfully updated")
        return record

    def _delete_db_record(self) -> None:
        self.store.delete(self.collection, self.id_)
        logger.info(f"_delete_db_record ::: {self.record_type=} {self.id_=} successfully deleted")

    @classmethod
    def _record_to_ui(cls, record: Dict) -> Dict:
        item = dict(record)
        substitute_keys(dict_to_process=item, base_keys=cls.keys_from_db)
        return item

    @classmethod
    def _list_ui(cls, store: CollectionStore = None) -> List[Dict]:
        store = store or get_store()
        return [cls._record_to_ui(record) for record in store.list(cls.collection)]

    def _to_ui(self) -> Dict:
        return self._record_to_ui(self._to_dict())
