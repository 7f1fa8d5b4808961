# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Test suite configuration

Tests marked ``slow`` (fitting the full lexical decision model) only run with
``pytest --runslow``.
"""
import matplotlib
import pytest

# render off-screen
matplotlib.use('Agg')


def pytest_addoption(parser):
    parser.addoption("--runslow", action="store_true", default=False, help="include tests marked as slow")


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: test that takes long to run")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--runslow"):
        return
    marker = pytest.mark.skip(reason="slow; use --runslow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(marker)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    from matplotlib import pyplot

    pyplot.close('all')
