__all__ = ["ValidationError", "RecordNotFound", "NotLoggedIn"]


class ValidationError(Exception):
    pass


class RecordNotFound(Exception):
    pass


class NotLoggedIn(Exception):
    pass
