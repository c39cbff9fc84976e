import logging
from colorlog import ColoredFormatter
from app.core.settings import settings

LOG_FORMAT = (
    "%(log_color)s[%(asctime)s] [%(levelname)-8s] "
    "%(reset)s%(blue)s%(name)s:%(reset)s %(message)s"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def build_logger(name: str, level: str) -> logging.Logger:
    """
    Colored stream logger that owns its output.

    Safe to call again for the same name (app reloads, test re-imports):
    the handler is attached only once.
    """
    log = logging.getLogger(name)
    log.setLevel(level)
    if not any(getattr(h, "_sales_handler", False) for h in log.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", reset=True, log_colors=LOG_COLORS))
        handler._sales_handler = True
        log.addHandler(handler)
    log.propagate = False
    return log


logger = build_logger("sales", settings.LOG_LEVEL)

# domain event lines go to "sales.events" so they can be filtered apart
event_logger = logger.getChild("events")
