"""
Middleware modules for tribler-arr-shim.
"""
from tribler_arr_shim.middleware.correlation import CORRELATION_HEADER, NO_CORRELATION_ID, CorrelationIdMiddleware

__all__ = ["CORRELATION_HEADER", "NO_CORRELATION_ID", "CorrelationIdMiddleware"]
