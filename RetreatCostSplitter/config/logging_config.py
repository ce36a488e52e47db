import logging

from config.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install a single stream handler on the root logger (idempotent)."""
    root = logging.getLogger()
    if not any(getattr(h, "_retreat_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._retreat_handler = True
        root.addHandler(handler)
    root.setLevel(level)
