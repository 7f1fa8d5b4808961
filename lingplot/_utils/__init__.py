# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
from .basic import (
    tqdm, as_sequence, natsorted,
    LOG_LEVELS, log_level, set_log_level, ScreenHandler,
)
