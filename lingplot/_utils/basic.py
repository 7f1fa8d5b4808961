# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"Logging and sequence helpers shared by the lingplot modules"
import logging
import re

from .notebooks import tqdm


LOG_LEVELS = {name: logging.getLevelName(name) for name in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')}


def as_sequence(items, item_type=str):
    "Wrap a single ``item_type`` item in a tuple"
    return (items,) if isinstance(items, item_type) else items


def log_level(arg):
    """Logging module constant for ``arg``

    Parameters
    ----------
    arg : str | int
        Level name (case-insensitive, e.g. ``'debug'``) or constant.
    """
    if isinstance(arg, str):
        if arg.upper() not in LOG_LEVELS:
            raise ValueError(f"log level {arg!r}; must be one of {', '.join(LOG_LEVELS)}")
        return LOG_LEVELS[arg.upper()]
    elif isinstance(arg, int):
        return arg
    raise TypeError(f"log level {arg!r}; need int or str")


def set_log_level(level, logger_name='lingplot'):
    """Set the minimum level of messages that the lingplot logger passes on

    Parameters
    ----------
    level : str | int
        Level name (debug, info, warning, error, critical) or constant from
        the :mod:`logging` module.
    logger_name : str
        Logger to modify (default ``'lingplot'``).
    """
    logging.getLogger(logger_name).setLevel(log_level(level))


class ScreenHandler(logging.StreamHandler):
    "Print log records without breaking up :mod:`tqdm` progress bars"

    def __init__(self, formatter=None):
        super().__init__()
        self.setFormatter(formatter or logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))

    def emit(self, record):
        tqdm.write(self.format(record))


def natsorted(seq):
    "Sort strings so that embedded numbers compare numerically (S2 < S10)"
    def key(text):
        return [(0, int(part), '') if part.isdigit() else (1, 0, part) for part in re.split(r'(\d+)', text)]
    return sorted(seq, key=key)
