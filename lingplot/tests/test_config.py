# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import logging

import pytest

from lingplot import configure, set_log_level
from lingplot._config import CONFIG
from lingplot._utils import ScreenHandler


@pytest.fixture
def restore_config():
    old = dict(CONFIG)
    yield
    configure(log=False)
    CONFIG.update(old)


def test_configure(restore_config):
    "Test configure()"
    configure(show=False, format='SVG', figure_background=(.9, .9, .9), autorun=True, tqdm=False)
    assert CONFIG['show'] is False
    assert CONFIG['format'] == 'svg'
    assert CONFIG['figure_background'] == (.9, .9, .9)
    assert CONFIG['autorun'] is True
    assert CONFIG['tqdm'] is False
    configure(figure_background=True)
    assert CONFIG['figure_background'] == 'white'

    # invalid values leave the configuration unchanged
    with pytest.raises(ValueError):
        configure(show=True, format='xyz')
    assert CONFIG['show'] is False
    with pytest.raises(TypeError):
        configure(format=1)
    with pytest.raises(ValueError):
        configure(figure_background='not-a-color')


def test_logging(restore_config):
    "Test the lingplot logger"
    logger = logging.getLogger('lingplot')
    configure(log=True)
    handler = CONFIG['log']
    assert isinstance(handler, ScreenHandler)
    assert handler in logger.handlers
    configure(log=False)
    assert handler not in logger.handlers
    assert CONFIG['log'] is False

    old_level = logger.level
    set_log_level('info')
    assert logger.level == logging.INFO
    set_log_level(logging.WARNING)
    assert logger.level == logging.WARNING
    with pytest.raises(ValueError):
        set_log_level('loud')
    with pytest.raises(TypeError):
        set_log_level(1.5)
    logger.setLevel(old_level)
