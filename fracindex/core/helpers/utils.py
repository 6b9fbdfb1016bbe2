import functools
import importlib
import logging
import pkgutil
from collections.abc import Callable


LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s'


def setup_logging(level: str = "WARNING") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def import_submodules(package: str) -> list[str]:
    """Import every direct submodule of `package` and return their names."""
    root = importlib.import_module(package)
    names = [f"{package}.{info.name}" for info in pkgutil.iter_modules(root.__path__)]
    for name in names:
        importlib.import_module(name)
    return names


def scan(package: str):
    """
    Import the modules of `package` before the decorated function runs,
    so the commands they declare are registered by then.
    """
    def decorator(func: Callable):

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            import_submodules(package)
            return func(*args, **kwargs)

        return wrapper

    return decorator
