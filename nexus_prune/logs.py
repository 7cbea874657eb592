import logging
import sys

from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def setup_logging(level: str = "info") -> None:
    name = (level or "info").strip().lower()
    if name not in LOG_LEVELS:
        raise ConfigurationError(
            f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{level}'"
        )
    root = logging.getLogger()
    # replace only our own console handler so repeated calls do not duplicate lines
    for handler in root.handlers[:]:
        if getattr(handler, "nexus_prune", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.nexus_prune = True
    root.addHandler(handler)
    root.setLevel(getattr(logging, name.upper()))
    logging.getLogger("urllib3").setLevel(logging.WARNING)
