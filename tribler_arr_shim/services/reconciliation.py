"""
Reconciliation of local associations with Tribler's download list.

Downloads started outside the shim (Tribler GUI, another tool, or an add whose
association write failed) have no category locally. A pass files each of them
under a default category so that Sonarr/Radarr can see them.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from tribler_arr_shim.clients import TriblerClient
from tribler_arr_shim.exceptions import ShimError
from tribler_arr_shim.services.association_store import AssociationStore


@dataclass
class ReconciliationResult:
    """Outcome of one pass."""
    imported: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, object]:
        return {
            "imported": len(self.imported),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
            "errors": dict(self.failed),
        }


class ReconciliationEngine:
    """
    Backfills associations for Tribler downloads unknown to the local store.
    """

    def __init__(self, store: AssociationStore, client: TriblerClient):
        self.store = store
        self.client = client

    async def run(self, default_category: str) -> ReconciliationResult:
        """
        Run one best-effort pass.

        Errors reading either side propagate: there is nothing to compare
        without both lists. Errors inserting a single association are logged
        and recorded, and the pass moves on.
        """
        known = {t.hash for t in await self.store.list_all_torrents()}
        downloads = await self.client.list_downloads()
        logger.info(f"Reconciling {len(downloads)} Tribler download(s) against {len(known)} local association(s)")

        result = ReconciliationResult()
        for download in downloads:
            infohash = download.infohash
            if infohash in known:
                continue

            try:
                inserted = await self.store.add_torrent(infohash, default_category)
            except (ShimError, SQLAlchemyError) as e:
                logger.warning(f"Could not import torrent {infohash} ({download.name}): {e}")
                result.failed[infohash] = str(e)
                continue

            if inserted:
                logger.info(f"Imported torrent {infohash} ({download.name}) into {default_category!r}")
                result.imported.append(infohash)
            else:
                # Added by a regular request after the local scan
                result.skipped.append(infohash)
            known.add(infohash)

        logger.info(
            f"Reconciliation complete: {len(result.imported)} imported, "
            f"{len(result.skipped)} skipped, {len(result.failed)} failed"
        )
        return result
