"""
HTTP routers: the qBittorrent Web API v2 surface plus shim maintenance.
"""
from tribler_arr_shim.api import application, auth, shim, torrents

__all__ = ["application", "auth", "shim", "torrents"]
