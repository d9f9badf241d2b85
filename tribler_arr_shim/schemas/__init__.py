"""
Pydantic schemas for both sides of the translation.
"""
from tribler_arr_shim.schemas.tribler import (
    RemoteDownload,
    RemoteFile,
    DownloadsResponse,
    FilesResponse,
    AddDownloadResponse,
)
from tribler_arr_shim.schemas.qbittorrent import (
    ClientTorrentView,
    TorrentProperties,
    ClientFile,
    AppPreferences,
)

__all__ = [
    "RemoteDownload",
    "RemoteFile",
    "DownloadsResponse",
    "FilesResponse",
    "AddDownloadResponse",
    "ClientTorrentView",
    "TorrentProperties",
    "ClientFile",
    "AppPreferences",
]
