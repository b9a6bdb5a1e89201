import logging
import platform
import time
import os
import warnings
import cellcycle

LOG_LEVEL_ENV_VAR = 'CELLCYCLE_LOG'
BASE_LOGGER_NAME = 'cellcycle'
#: Level of the per-tick simulation trace
EXTENDED_DEBUG = 5
NAMED_LOG_LEVELS = {'NOTSET': logging.NOTSET,
                    'EXTENDED_DEBUG': EXTENDED_DEBUG,
                    'DEBUG': logging.DEBUG,
                    'INFO': logging.INFO,
                    'WARNING': logging.WARNING,
                    'ERROR': logging.ERROR,
                    'CRITICAL': logging.CRITICAL}


def formatter(time_utc=False):
    """Log formatter with millisecond time stamps, local or UTC."""
    log_fmt = logging.Formatter('%(asctime)s.%(msecs).3d - %(name)s - '
                                '%(levelname)s - %(message)s',
                                datefmt='%Y-%m-%d %H:%M:%S')
    if time_utc:
        log_fmt.converter = time.gmtime
    return log_fmt


def _level_from_environment(level):
    """Return the level set by ``CELLCYCLE_LOG``, or ``level`` if unset."""
    setting = os.environ.get(LOG_LEVEL_ENV_VAR)
    if setting is None:
        return level
    try:
        return int(setting)
    except ValueError:
        if setting in NAMED_LOG_LEVELS:
            return NAMED_LOG_LEVELS[setting]
        raise ValueError('%s must be an integer log level or one of %s '
                         '(case-sensitive), got "%s"' % (
                             LOG_LEVEL_ENV_VAR,
                             ', '.join(NAMED_LOG_LEVELS), setting))


def setup_logger(level=logging.WARNING, console_output=True, file_output=False,
                 time_utc=False, capture_warnings=True):
    """
    Configure the base ``cellcycle`` logger, replacing its handlers

    Parameters
    ----------
    level : int
        Log level, unless ``CELLCYCLE_LOG`` is set.
    console_output : bool
        Log to stderr.
    file_output : string or False
        File name to copy log output to.
    time_utc : bool
        Use UTC time stamps instead of local time.
    capture_warnings : bool
        Route the warnings module through logging.

    Returns
    -------
    logging.Logger
    """
    log = logging.getLogger(BASE_LOGGER_NAME)
    log.setLevel(_level_from_environment(level))
    log.handlers = []

    log_fmt = formatter(time_utc=time_utc)
    if console_output:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(log_fmt)
        log.addHandler(stream_handler)
    if file_output:
        file_handler = logging.FileHandler(file_output)
        file_handler.setFormatter(log_fmt)
        log.addHandler(file_handler)

    log.info('Logging started on cellcycle version %s', cellcycle.__version__)
    log.debug('Python %s on %s', platform.python_version(),
              platform.platform())
    logging.captureWarnings(capture_warnings)
    return log


def get_logger(logger_name=BASE_LOGGER_NAME, network=None, log_level=None,
               **kwargs):
    """
    Return a logger under the ``cellcycle`` namespace

    The base logger is configured with :func:`setup_logger` (passing
    ``kwargs``) the first time any cellcycle logger is requested.

    Parameters
    ----------
    logger_name : string
        Usually ``__name__`` or ``self.__module__``.
    network : cellcycle.Network, optional
        Prefix log entries with the network's name.
    log_level : bool or int, optional
        True means DEBUG, an integer is used as is, None or False keeps the
        current level.

    Examples
    --------

    >>> from cellcycle.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug('Test message')
    """
    if BASE_LOGGER_NAME not in logging.Logger.manager.loggerDict:
        setup_logger(**kwargs)
    elif kwargs:
        warnings.warn('cellcycle logger already exists, ignoring keyword '
                      'arguments to setup_logger')

    logger = logging.getLogger(logger_name)

    if log_level is not None and log_level is not False:
        if isinstance(log_level, bool):
            log_level = logging.DEBUG
        elif not isinstance(log_level, int):
            raise ValueError('log_level must be a boolean, integer or None')
        if logger.getEffectiveLevel() != log_level:
            logger.setLevel(log_level)

    if network is None:
        return logger
    return NetworkLoggerAdapter(logger, {'network': network})


class NetworkLoggerAdapter(logging.LoggerAdapter):
    """Prefix log entries with ``[network name]``."""
    def process(self, msg, kwargs):
        return '[%s] %s' % (self.extra['network'].name, msg), kwargs
