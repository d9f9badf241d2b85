"""
Utility modules for tribler-arr-shim.
"""
from tribler_arr_shim.utils.logger import setup_logger
from tribler_arr_shim.utils.errors import ErrorCode, raise_error, register_exception_handlers
from tribler_arr_shim.utils.forms import first_url, parse_hashes

__all__ = [
    "setup_logger",
    "ErrorCode",
    "raise_error",
    "register_exception_handlers",
    "first_url",
    "parse_hashes",
]
