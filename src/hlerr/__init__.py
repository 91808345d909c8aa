from importlib.metadata import version
from .hlerr_main import execute

__version__ = version("hlerr")


__all__ = [
    "execute",
    "__version__",
]
