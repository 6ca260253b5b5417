from mrbart._version import __version__
from mrbart import algorithms, data, utils

__all__ = [
    "__version__",
    "algorithms",
    "data",
    "utils"
]
