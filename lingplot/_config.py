# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Session-wide settings"""
import logging
from typing import Any, Dict

from matplotlib.colors import to_rgb
from matplotlib.figure import Figure

from ._utils import ScreenHandler


CONFIG: Dict[str, Any] = {
    'autorun': None,  # None: decide based on whether the session is interactive
    'show': True,
    'format': 'png',
    'figure_background': 'white',
    'tqdm': True,
    'log': False,  # ScreenHandler while logging to the screen
}


def _check_format(format: str) -> str:
    if not isinstance(format, str):
        raise TypeError(f"{format=}: need str")
    format = format.lower()
    supported = Figure().canvas.get_supported_filetypes()
    if format not in supported:
        raise ValueError(f"{format=}: not supported by matplotlib; use one of {', '.join(sorted(supported))}")
    return format


def _set_screen_log(enable: bool) -> Any:
    logger = logging.getLogger('lingplot')
    if enable:
        if CONFIG['log']:
            return CONFIG['log']
        handler = ScreenHandler()
        handler.setLevel(logging.DEBUG)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.debug("Logging to screen")
        return handler
    elif CONFIG['log']:
        logger.removeHandler(CONFIG['log'])
    return False


def configure(
        show: bool = None,
        format: str = None,
        figure_background: Any = None,
        autorun: bool = None,
        tqdm: bool = None,
        log: bool = None,
):
    """Change settings for the current session

    Arguments that are not specified leave the corresponding setting
    unchanged. If any argument is invalid, no setting is changed.

    Parameters
    ----------
    show
        Show figures on the screen when they are created. Set to ``False`` to
        generate and save figures in batch mode.
    format
        File format used by ``save()`` when the file name has no extension
        (e.g., ``'png'``, ``'svg'``, ``'pdf'``).
    figure_background : bool | matplotlib color
        Figure background color. ``True`` for white (the default), ``False``
        for the matplotlib default.
    autorun
        Block until figure windows are closed when figures are shown (by
        default only in scripts).
    tqdm
        Display progress bars while rendering several figures.
    log
        Print lingplot log messages to the screen.
    """
    new: Dict[str, Any] = {}
    if show is not None:
        new['show'] = bool(show)
    if format is not None:
        new['format'] = _check_format(format)
    if figure_background is True:
        new['figure_background'] = 'white'
    elif figure_background is False:
        new['figure_background'] = False
    elif figure_background is not None:
        to_rgb(figure_background)
        new['figure_background'] = figure_background
    if autorun is not None:
        new['autorun'] = bool(autorun)
    if tqdm is not None:
        new['tqdm'] = bool(tqdm)
    if log is not None:
        new['log'] = _set_screen_log(log)
    CONFIG.update(new)
