"""
Database models for tribler-arr-shim.
"""
from tribler_arr_shim.models.category import Category
from tribler_arr_shim.models.torrent import Torrent

__all__ = [
    "Category",
    "Torrent",
]
