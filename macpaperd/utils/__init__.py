"""macpaperd utilities package."""

from .error_handler import StoreInconsistent, handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger, set_level

__all__ = [
    "ExitCodes",
    "StoreInconsistent",
    "handle_exceptions",
    "logger",
    "set_level",
]
