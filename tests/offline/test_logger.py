import logging

from plc5comm.logger import LOG_VERBOSE, configure_default_logger


def test_configure_default_logger_adds_handlers(tmp_path):
    log_file = tmp_path / 'plc5comm.log'
    package_logger = logging.getLogger('plc5comm')
    other_logger = logging.getLogger('my_app')
    before = list(package_logger.handlers), list(other_logger.handlers)
    try:
        configure_default_logger(LOG_VERBOSE, filename=str(log_file), logger='my_app')
        assert package_logger.level == LOG_VERBOSE
        assert other_logger.level == LOG_VERBOSE
        assert len(other_logger.handlers) == len(before[1]) + 2

        logging.getLogger('plc5comm.test').verbose('dumped %s', 'packet')
        for handler in package_logger.handlers:
            handler.flush()
        assert 'dumped packet' in log_file.read_text(encoding='utf-8')
        assert '[VERBOSE]' in log_file.read_text(encoding='utf-8')
    finally:
        for _log, handlers in zip((package_logger, other_logger), before):
            for handler in _log.handlers[len(handlers):]:
                handler.close()
            _log.handlers = handlers
            _log.setLevel(logging.NOTSET)
