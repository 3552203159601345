import os
import logging
from logging.handlers import RotatingFileHandler

from .settings import LOG_SETTINGS

LOGGER_NAME = 'jpeg_structure'


def init_log():
    """ Initialize logging utilities.

        Returns:
            logging.Logger object with appropriate handler initialized.

    """
    log = logging.getLogger(LOGGER_NAME)
    if log.handlers:
        return log

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if LOG_SETTINGS['enable_console']:
        init_console(log, formatter)
    if LOG_SETTINGS['enable_file']:
        init_file(log, formatter)

    return log


def init_console(log, formatter):
    """ Initialize console stream handler. """
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)


def init_file(log, formatter):
    """ Initialize file handler. """
    log_file = os.path.expanduser(LOG_SETTINGS['file_name'])
    log_dir = os.path.dirname(log_file)
    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(LOG_SETTINGS['file_size']),
            backupCount=LOG_SETTINGS['file_count'])
    except OSError as e:
        log.error("Could not initialize log file : {}".format(str(e)))
        return

    file_handler.setFormatter(formatter)
    log.addHandler(file_handler)


def get_log():
    """ Returns package logging.Logger global object. """
    return js_log


def set_level(level):
    """ Set logging threshold level.

        Args:
            level (str): Minimum level for a log event to be recorded. List
             include : CRITICAL, ERROR, WARNING, INFO, DEBUG, NOTSET.

    """
    js_log.setLevel(level)
    for handler in js_log.handlers:
        handler.setLevel(level)


js_log = init_log()
set_level(LOG_SETTINGS['level'])
