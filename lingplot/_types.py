from pathlib import Path
from typing import Union


PathArg = Union[Path, str]
