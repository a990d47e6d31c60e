import logging
import sys

from .config import LOG_LEVEL, LOG_NAMESPACES


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def configure_logging(level: str = LOG_LEVEL, allowed_namespaces=None) -> logging.Logger:
    """
    Attaches a stdout handler to the 'sales_admin' logger.

    Modules log through logging.getLogger(__name__), so every logger under
    'sales_admin.*' inherits the level and handler configured here.
    Calling this twice does not add a second handler.
    """
    app_logger = logging.getLogger("sales_admin")
    app_logger.setLevel(level)

    if any(getattr(h, "_sales_admin_console", False) for h in app_logger.handlers):
        return app_logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._sales_admin_console = True

    namespaces = LOG_NAMESPACES if allowed_namespaces is None else allowed_namespaces
    if namespaces:
        console_handler.addFilter(NamespaceFilter(namespaces))

    app_logger.addHandler(console_handler)
    return app_logger


# To see the SQL issued by the store, raise the Tortoise client logger:
# logging.getLogger("tortoise.db_client").setLevel(logging.DEBUG)
