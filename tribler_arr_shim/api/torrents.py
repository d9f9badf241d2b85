"""
qBittorrent torrent and category endpoints, backed by Tribler.

Handlers only orchestrate: the Engine Client talks to Tribler, the
Association Store supplies categories and the State Mapper reshapes the
result. Typed errors propagate to the handlers in utils/errors.py.
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from tribler_arr_shim.constants import (
    ALL_HASHES_KEYWORD,
    TRIBLER_STATE_RECHECK,
    TRIBLER_STATE_RESUME,
    TRIBLER_STATE_STOP,
)
from tribler_arr_shim.exceptions import RemoteEngineError, ShimError
from tribler_arr_shim.schemas import ClientFile, ClientTorrentView, TorrentProperties
from tribler_arr_shim.utils import ErrorCode, first_url, parse_hashes, raise_error

router = APIRouter(prefix="/api/v2/torrents", tags=["torrents"])


async def _resolve_hashes(request: Request, hashes: str) -> List[str]:
    """Expand the hashes form field, including the "all" keyword."""
    parsed = parse_hashes(hashes)
    if ALL_HASHES_KEYWORD in parsed:
        downloads = await request.app.state.tribler.list_downloads()
        return [d.infohash for d in downloads]
    return parsed


async def _set_run_state(request: Request, hashes: str, state: str):
    client = request.app.state.tribler
    for infohash in await _resolve_hashes(request, hashes):
        await client.update_download(infohash, state)


# =============================================================================
# Torrent listing
# =============================================================================

@router.get("/info", response_model=List[ClientTorrentView])
async def get_info(
    request: Request,
    category: Optional[str] = Query(None, description="Only torrents in this category; empty for uncategorized"),
    hashes: Optional[str] = Query(None, description="Only these infohashes, | separated"),
):
    """
    List torrents, optionally restricted to one category.

    With a category, local hashes are resolved first and Tribler is asked for
    its download list once; the join happens in memory.
    """
    store = request.app.state.store
    client = request.app.state.tribler
    mapper = request.app.state.mapper

    if category:
        associations = await store.list_torrents_by_category(category)
        if not associations:
            return []
        downloads = {d.infohash: d for d in await client.list_downloads()}
        torrents = [
            mapper.view(downloads[a.hash], a.category)
            for a in associations
            if a.hash in downloads
        ]
    else:
        categories: Dict[str, str] = {a.hash: a.category for a in await store.list_all_torrents()}
        downloads = await client.list_downloads()
        if category is None:
            torrents = [mapper.view(d, categories.get(d.infohash)) for d in downloads]
        else:
            # category="" asks for torrents with no local association
            torrents = [mapper.view(d, "") for d in downloads if d.infohash not in categories]

    wanted = parse_hashes(hashes)
    if wanted:
        torrents = [t for t in torrents if t.hash.lower() in wanted]
    return torrents


@router.get("/properties", response_model=TorrentProperties)
async def get_properties(request: Request, hash: str = Query(...)):
    download = await request.app.state.tribler.get_download(hash)
    return request.app.state.mapper.properties(download)


@router.get("/files", response_model=List[ClientFile])
async def get_files(request: Request, hash: str = Query(...)):
    files = await request.app.state.tribler.get_files(hash)
    return request.app.state.mapper.files(files)


# =============================================================================
# Adding and removing
# =============================================================================

@router.post("/add")
async def add_torrent(
    request: Request,
    urls: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
):
    """
    Add a torrent from a magnet link or URL.

    Only the first URL is used. Once Tribler has accepted the download the
    request succeeds even if the association cannot be stored: the next
    reconciliation pass files the download under the default category.
    """
    config = request.app.state.config
    store = request.app.state.store

    uri = first_url(urls)
    if uri is None:
        raise_error(ErrorCode.VALIDATION_ERROR, "No URL supplied", status_code=400)

    category = (category or "").strip() or config.default_category
    logger.info(f"Adding torrent to category {category!r}: {uri[:80]}")

    infohash = await request.app.state.tribler.add_download(uri)

    try:
        await store.add_category(category, config.download_dir)
        await store.add_torrent(infohash, category)
    except (ShimError, SQLAlchemyError) as e:
        logger.warning(f"Torrent {infohash} added to Tribler but not categorised, left for reconciliation: {e}")

    return PlainTextResponse("Ok.")


@router.post("/delete")
async def delete_torrents(
    request: Request,
    hashes: str = Form(...),
    deleteFiles: str = Form("false"),
):
    """Remove torrents from Tribler and drop their associations."""
    client = request.app.state.tribler
    store = request.app.state.store
    remove_data = deleteFiles.strip().lower() == "true"

    for infohash in await _resolve_hashes(request, hashes):
        try:
            await client.delete_download(infohash, remove_data=remove_data)
        except RemoteEngineError as e:
            if e.status != 404:
                raise
            logger.info(f"Torrent {infohash} already gone from Tribler")
        await store.delete_torrent(infohash)

    return PlainTextResponse("Ok.")


# =============================================================================
# Run state
# =============================================================================

@router.post("/pause")
@router.post("/stop")
async def pause_torrents(request: Request, hashes: str = Form(...)):
    await _set_run_state(request, hashes, TRIBLER_STATE_STOP)
    return PlainTextResponse("Ok.")


@router.post("/resume")
@router.post("/start")
async def resume_torrents(request: Request, hashes: str = Form(...)):
    await _set_run_state(request, hashes, TRIBLER_STATE_RESUME)
    return PlainTextResponse("Ok.")


@router.post("/recheck")
async def recheck_torrents(request: Request, hashes: str = Form(...)):
    await _set_run_state(request, hashes, TRIBLER_STATE_RECHECK)
    return PlainTextResponse("Ok.")


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories")
async def get_categories(request: Request):
    """Categories keyed by name, {} when there are none."""
    categories = await request.app.state.store.list_categories()
    return {
        c.name: {"name": c.name, "savePath": c.save_path}
        for c in categories
    }


@router.post("/createCategory")
async def create_category(
    request: Request,
    category: str = Form(""),
    savePath: str = Form(""),
):
    """Create a category; creating an existing one is a no-op."""
    name = category.strip()
    if not name:
        raise_error(ErrorCode.VALIDATION_ERROR, "Category name is empty", status_code=400)

    save_path = savePath.strip() or request.app.state.config.download_dir
    await request.app.state.store.add_category(name, save_path)
    return PlainTextResponse("Ok.")


# =============================================================================
# Accepted but not supported by Tribler
# =============================================================================

@router.post("/setCategory")
async def set_category(hashes: str = Form(""), category: str = Form("")):
    # TODO: re-assign the association once the store supports updating a hash's category
    logger.debug(f"setCategory {category!r} for {hashes} ignored")
    return PlainTextResponse("Ok.")


@router.post("/setShareLimits")
async def set_share_limits(hashes: str = Form("")):
    logger.debug(f"setShareLimits for {hashes} ignored")
    return PlainTextResponse("Ok.")


@router.post("/topPrio")
async def set_top_priority(hashes: str = Form("")):
    logger.debug(f"topPrio for {hashes} ignored")
    return PlainTextResponse("Ok.")


@router.post("/setForceStart")
async def set_force_start(hashes: str = Form(""), value: str = Form("true")):
    logger.debug(f"setForceStart={value} for {hashes} ignored")
    return PlainTextResponse("Ok.")
