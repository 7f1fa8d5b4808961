# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import pytest

pytest.register_assert_rewrite('lingplot.testing._testing')

from ._testing import (
    hide_plots,
    TempDir, working_directory,
    assert_dataset_equal, assert_dataobj_equal,
)
