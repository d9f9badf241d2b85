"""
Projection of Tribler downloads onto qBittorrent torrents.

Everything here is pure: no I/O, no environment reads, no hidden state.
Tribler does not track share ratios, piece statistics, priorities or
timestamps; the qBittorrent fields for those are declared once in the
UNSUPPORTED_* tables below and emitted verbatim. The *arr clients tolerate
zeros there, so the tables must not be "improved" with guesses.
"""
import math
import ntpath
import posixpath
from typing import Dict, Iterable, List, Optional

from tribler_arr_shim.config import TriblerConfig
from tribler_arr_shim.schemas import (
    ClientFile,
    ClientTorrentView,
    RemoteDownload,
    RemoteFile,
    TorrentProperties,
)

# Tribler download status -> qBittorrent torrent state.
# A finished download is reported as pausedUP so that Sonarr/Radarr import it;
# Tribler keeps seeding on its own regardless of what the client believes.
STATE_MAP: Dict[str, str] = {
    "SEEDING": "pausedUP",
    "DOWNLOADING": "downloading",
    "PAUSED": "pausedUP",
}

# State emitted for any Tribler status missing from STATE_MAP
# (METADATA, HASHCHECKING, STOPPED_ON_ERROR, ...). Deliberately not a real
# qBittorrent state so the gap shows up in the client instead of being hidden.
UNMAPPED_STATE = ""

UNSUPPORTED_TORRENT_DEFAULTS = {
    "tags": "",
    "priority": 0,
    "ratio": 0,
    "f_l_piece_prio": False,
    "seq_dl": False,
    "super_seeding": False,
    "force_start": False,
}

UNSUPPORTED_PROPERTY_DEFAULTS = {
    "comment": "",
    "created_by": "",
    "share_ratio": 0,
    "creation_date": 0,
    "addition_date": 0,
    "completion_date": 0,
    "last_seen": 0,
    "total_uploaded": 0,
    "total_uploaded_session": 0,
    "total_downloaded": 0,
    "total_downloaded_session": 0,
    "total_wasted": 0,
    "up_limit": 0,
    "dl_limit": 0,
    "time_elapsed": 0,
    "seeding_time": 0,
    "nb_connections": 0,
    "nb_connections_limit": 0,
    "piece_size": 0,
    "pieces_have": 0,
    "pieces_num": 0,
    "reannounce": 0,
    "dl_speed_avg": 0,
    "up_speed_avg": 0,
    "peers_total": 0,
    "seeds_total": 0,
}

UNSUPPORTED_FILE_DEFAULTS = {
    "priority": 0,
    "is_seed": False,
    "piece_range": [],
    "availability": 0,
}


def _as_int(value: float) -> int:
    # Tribler serialises an unknown ETA as Infinity
    return int(value) if math.isfinite(value) else 0


def map_state(status: str) -> str:
    """Translate a Tribler status, UNMAPPED_STATE when there is no equivalent."""
    return STATE_MAP.get(status, UNMAPPED_STATE)


def content_path(destination: str, name: str) -> str:
    """
    Path of the torrent's content as qBittorrent reports it.

    Tribler's destination is always the save directory, and the torrent name is
    the single file or the root folder inside it, so the two are joined
    unconditionally. The separator follows the destination: a Windows-hosted
    Tribler reports backslash paths.
    """
    if not name:
        return destination
    if not destination:
        return name
    if "\\" in destination and "/" not in destination:
        return ntpath.join(destination, name)
    return posixpath.join(destination, name)


def to_client_view(download: RemoteDownload, category: str) -> ClientTorrentView:
    """Project one Tribler download, joined with its local category."""
    return ClientTorrentView(
        hash=download.infohash,
        name=download.name,
        category=category,
        state=map_state(download.status),
        save_path=download.destination,
        content_path=content_path(download.destination, download.name),
        size=download.size,
        progress=download.progress,
        dlspeed=_as_int(download.speed_down),
        upspeed=_as_int(download.speed_up),
        eta=_as_int(download.eta),
        num_seeds=download.num_seeds,
        num_leechs=download.num_peers,
        num_complete=download.num_seeds,
        num_incomplete=download.num_peers,
        **UNSUPPORTED_TORRENT_DEFAULTS,
    )


def to_client_properties(download: RemoteDownload) -> TorrentProperties:
    """Project a download onto the properties endpoint."""
    return TorrentProperties(
        name=download.name,
        save_path=download.destination,
        total_size=download.size,
        dl_speed=_as_int(download.speed_down),
        up_speed=_as_int(download.speed_up),
        eta=_as_int(download.eta),
        peers=download.num_peers,
        seeds=download.num_seeds,
        **UNSUPPORTED_PROPERTY_DEFAULTS,
    )


def to_client_files(files: Iterable[RemoteFile]) -> List[ClientFile]:
    return [
        ClientFile(
            index=f.index,
            name=f.name,
            size=f.size,
            progress=f.progress,
            **UNSUPPORTED_FILE_DEFAULTS,
        )
        for f in files
    ]


class StateMapper:
    """
    The projection functions bound to a configuration.

    The only configuration-dependent decision is the category shown for a
    download that has no local association yet: it is the category the next
    reconciliation pass will file it under.
    """

    def __init__(self, config: TriblerConfig):
        self.config = config

    def view(self, download: RemoteDownload, category: Optional[str] = None) -> ClientTorrentView:
        return to_client_view(download, category if category is not None else self.config.default_category)

    def properties(self, download: RemoteDownload) -> TorrentProperties:
        return to_client_properties(download)

    def files(self, files: Iterable[RemoteFile]) -> List[ClientFile]:
        return to_client_files(files)
