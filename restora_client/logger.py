import json
import os
from logging import LoggerAdapter, getLogger, StreamHandler, Formatter


class ClientLogger(LoggerAdapter):
    """
    Prefixes every record with the id of the client (device) that wrote it,
    several clients may share one process in tests so each one gets its own adapter.
    """

    def process(self, msg, kwargs):
        return f"[{self.extra.get('client_id')}] : {msg}", kwargs


def conf_logger(level):
    logger_ = getLogger('restora_client')
    console_handler = StreamHandler()
    console_handler.setLevel(level)
    formatter = Formatter('%(asctime)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    if logger_.hasHandlers():
        logger_.handlers.clear()
    logger_.addHandler(console_handler)
    logger_.setLevel(level)
    return logger_


base_logger = conf_logger(os.environ.get('RESTORA_LOG_LEVEL', 'INFO').upper())
logger = ClientLogger(base_logger, {'client_id': None})


def client_logger(client_id) -> ClientLogger:
    return ClientLogger(base_logger, {'client_id': client_id})


def log_exception(error: BaseException, msg: str = "", level: str = 'warning', log: LoggerAdapter = None, **kwargs):
    log = log or logger
    allowed_log_levels = {
        'info': log.info,
        'warning': log.warning,
        'debug': log.debug,
        'error': log.error,
        'exception': log.exception,
    }
    log_level = 'warning' if level not in allowed_log_levels.keys() else level
    allowed_log_levels[log_level](msg=json.dumps({
        'error': str(error),
        'exception': error.__class__.__name__,
        'message': str(msg),
        'level': log_level,
        'kwargs': kwargs
    }, default=str))
