# preference_center/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    global _configured
    if not _configured:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO, which would duplicate our own vendor logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
