"""
Response shapes of the qBittorrent Web API v2 as consumed by Sonarr/Radarr.

Torrent, property and file models carry no defaults: every value is supplied
by services/state_mapper.py, which is where unsupported fields are declared.
"""
from typing import List

from pydantic import BaseModel, Field


class ClientTorrentView(BaseModel):
    """Entry of GET /api/v2/torrents/info."""
    hash: str
    name: str
    category: str
    state: str
    save_path: str
    content_path: str
    size: int
    progress: float
    dlspeed: int
    upspeed: int
    eta: int
    num_seeds: int
    num_leechs: int
    num_complete: int
    num_incomplete: int
    tags: str
    priority: int
    ratio: float
    f_l_piece_prio: bool
    seq_dl: bool
    super_seeding: bool
    force_start: bool


class TorrentProperties(BaseModel):
    """Body of GET /api/v2/torrents/properties."""
    name: str
    save_path: str
    comment: str
    created_by: str
    share_ratio: float
    creation_date: int
    addition_date: int
    completion_date: int
    last_seen: int
    total_uploaded: int
    total_uploaded_session: int
    total_downloaded: int
    total_downloaded_session: int
    total_wasted: int
    total_size: int
    up_limit: int
    dl_limit: int
    time_elapsed: int
    seeding_time: int
    nb_connections: int
    nb_connections_limit: int
    piece_size: int
    pieces_have: int
    pieces_num: int
    reannounce: int
    dl_speed: int
    dl_speed_avg: int
    up_speed: int
    up_speed_avg: int
    eta: int
    peers: int
    peers_total: int
    seeds: int
    seeds_total: int


class ClientFile(BaseModel):
    """Entry of GET /api/v2/torrents/files."""
    index: int
    name: str
    size: int
    progress: float
    priority: int
    is_seed: bool
    piece_range: List[int]
    availability: float


class AppPreferences(BaseModel):
    """Subset of GET /api/v2/app/preferences that the *arr clients inspect."""
    save_path: str = ""
    max_ratio_enabled: bool = False
    max_ratio: float = 0
    max_seeding_time_enabled: bool = False
    max_seeding_time: int = 0
    max_ratio_act: str = Field("pause", description="Action when a ratio limit is reached")
    queueing_enabled: bool = True
    dht: bool = True
    create_subfolder_enabled: bool = False
