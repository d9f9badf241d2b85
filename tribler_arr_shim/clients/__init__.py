"""
API clients for external services.
"""
from tribler_arr_shim.clients.tribler import TriblerClient

__all__ = [
    "TriblerClient",
]
