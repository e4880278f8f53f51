# app/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the service.

    Safe to call more than once (e.g. once per create_app() in tests); only
    the level is updated when handlers are already installed.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())

    # httpx logs every request at INFO, which drowns out availability warnings.
    logging.getLogger("httpx").setLevel(logging.WARNING)
