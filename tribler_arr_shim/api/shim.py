"""
Shim maintenance endpoints (not part of the qBittorrent API).
"""
from fastapi import APIRouter, Request
from loguru import logger

from tribler_arr_shim.services import ReconciliationResult

router = APIRouter(prefix="/api/v2/shim", tags=["shim"])


async def reconcile_default_category(state) -> ReconciliationResult:
    """
    Make sure the default category exists, then file every unknown Tribler
    download under it.
    """
    config = state.config
    await state.store.add_category(config.default_category, config.download_dir)
    return await state.reconciliation.run(config.default_category)


@router.post("/reconcile")
async def reconcile(request: Request):
    """Run a reconciliation pass now and report what it did."""
    logger.info("Reconciliation requested via API")
    result = await reconcile_default_category(request.app.state)
    return result.as_dict()
