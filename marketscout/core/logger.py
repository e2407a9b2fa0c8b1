import logging
import os
import sys
from marketscout.core.config import settings

LOGGER_NAMESPACE = "marketscout"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _configure_namespace() -> logging.Logger:
    """Attach handlers once to the shared 'marketscout' parent logger.

    Component loggers are children of it and propagate their records up,
    so the stdout and file handlers are never duplicated per component.
    """
    root = logging.getLogger(LOGGER_NAMESPACE)
    if root.handlers:
        return root

    root.setLevel(settings.LOG_LEVEL.upper())
    root.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    # Scan history file, only where the deployment created its directory
    log_dir = os.path.dirname(settings.LOG_FILE)
    if settings.LOG_FILE and os.path.isdir(log_dir):
        try:
            file_handler = logging.FileHandler(settings.LOG_FILE)
        except OSError:
            file_handler = None
        if file_handler:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    return root


class Logger:
    """Component logger, e.g. Logger("MarketScanner") -> 'marketscout.MarketScanner'."""

    def __init__(self, name: str):
        _configure_namespace()
        self.logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")

    def info(self, msg: str):
        self.logger.info(msg)

    def warn(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str, exc: Exception = None):
        self.logger.error(msg, exc_info=exc)

    def debug(self, msg: str):
        self.logger.debug(msg)
