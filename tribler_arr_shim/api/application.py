"""
qBittorrent application endpoints: versions and preferences.
"""
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from tribler_arr_shim.constants import QBITTORRENT_APP_VERSION, QBITTORRENT_WEBAPI_VERSION
from tribler_arr_shim.schemas import AppPreferences

router = APIRouter(prefix="/api/v2/app", tags=["app"])


@router.get("/version")
async def get_version():
    return PlainTextResponse(QBITTORRENT_APP_VERSION)


@router.get("/webapiVersion")
async def get_webapi_version():
    return PlainTextResponse(QBITTORRENT_WEBAPI_VERSION)


@router.get("/preferences", response_model=AppPreferences)
async def get_preferences(request: Request):
    """
    Preferences the *arr clients check before trusting the client.

    Ratio and seeding-time limits are reported as disabled because Tribler
    cannot enforce them.
    """
    config = request.app.state.config
    return AppPreferences(save_path=config.download_dir)


@router.get("/defaultSavePath")
async def get_default_save_path(request: Request):
    return PlainTextResponse(request.app.state.config.download_dir)
