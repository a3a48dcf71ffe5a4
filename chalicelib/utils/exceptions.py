__all__ = ["RecordNotFound", "DuplicateRecord", "NumberOfRetriesExceeded", "MandatoryFieldsAreNotFilled",
           "ValidationException", "InvalidJsonBody", "UnknownStoreBackend"]


# Generic Exceptions
class MandatoryFieldsAreNotFilled(Exception):
    pass


class InvalidJsonBody(Exception):
    pass


# Store exceptions
class RecordNotFound(Exception):
    pass


class DuplicateRecord(Exception):
    pass


class UnknownStoreBackend(Exception):
    pass


# DB Performance Exception
class NumberOfRetriesExceeded(Exception):
    pass


# Validations exceptions
class ValidationException(Exception):
    pass
