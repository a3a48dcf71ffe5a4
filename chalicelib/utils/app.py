import functools
from typing import Callable, Iterable

from chalice import Response

from chalicelib.constants.status_codes import http400, http404, http405, http409, http500
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled, ValidationException, InvalidJsonBody, \
    RecordNotFound, DuplicateRecord
from chalicelib.utils.logger import logger, log_exception


def error_response(error: Exception, msg: str = "", status_code: int = 400, *args, **kwargs):
    log_exception(error=error, msg=msg, status_code=status_code, *args, **kwargs)
    return Response(
        body={
            'error': str(error),
            'exception': error.__class__.__name__,
            "message": str(msg),
            'error_id': getattr(logger, 'current_request_id'),
            'level': getattr(error, 'LEVEL', 'exception')
        },
        status_code=status_code,
        headers={'Content-Type': 'application/json'}
    )


def request_exception_handler(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        try:
            logger.info(f'Calling function {func.__name__}')
            return func(*args, **kwargs)
        except (MandatoryFieldsAreNotFilled, ValidationException, InvalidJsonBody) as validation_error:
            setattr(validation_error, 'LEVEL', 'warning')
            return error_response(
                error=validation_error,
                msg=f'function = {func.__name__} , error = {validation_error}',
                status_code=http400)
        except RecordNotFound as not_found:
            setattr(not_found, 'LEVEL', 'warning')
            return error_response(
                error=not_found,
                msg=f'function = {func.__name__} , error = {not_found}',
                status_code=http404)
        except DuplicateRecord as duplicate:
            setattr(duplicate, 'LEVEL', 'warning')
            return error_response(
                error=duplicate,
                msg=f'function = {func.__name__} , error = {duplicate}',
                status_code=http409)
        except Exception as exception:
            return error_response(
                error=exception,
                msg=f'function = {func.__name__}, error = {exception}',
                status_code=http500)
    return result


def log_start_finish(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        logger.info(f'{func.__name__} ::: started')
        response = func(*args, **kwargs)
        logger.info(f'{func.__name__} ::: finished')
        return response
    return result


def method_not_allowed(method: str, allowed_methods: Iterable[str]) -> Response:
    allow = ','.join(allowed_methods)
    logger.warning(f'method_not_allowed ::: {method=} is not supported, {allow=}')
    return Response(
        body={'error': f'Method {method} is not allowed'},
        status_code=http405,
        headers={'Allow': allow, 'Content-Type': 'application/json'}
    )
