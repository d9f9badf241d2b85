"""
Payloads returned by the Tribler REST API.

Only the fields the shim reads are declared; everything else Tribler sends
is ignored. A JSON null in a declared field falls back to the field default
so that a half-initialised download (Tribler reports nulls while it is still
fetching metadata) never breaks the projection.
"""
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class _TriblerModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields[info.field_name]
        if value is None and not field.is_required():
            return field.get_default(call_default_factory=True)
        return value


class RemoteDownload(_TriblerModel):
    """One entry of GET /downloads."""
    infohash: str
    name: str = ""
    status: str = ""
    destination: str = ""
    size: int = 0
    progress: float = 0.0
    num_peers: int = 0
    num_seeds: int = 0
    speed_down: float = 0.0
    speed_up: float = 0.0
    eta: float = 0.0
    error: str = ""


class RemoteFile(_TriblerModel):
    """One entry of GET /downloads/{infohash}/files."""
    index: int
    name: str = ""
    size: int = 0
    progress: float = 0.0
    included: bool = True


class DownloadsResponse(_TriblerModel):
    downloads: List[RemoteDownload] = Field(default_factory=list)


class FilesResponse(_TriblerModel):
    infohash: str = ""
    files: List[RemoteFile] = Field(default_factory=list)


class AddDownloadResponse(_TriblerModel):
    started: bool = False
    infohash: str
