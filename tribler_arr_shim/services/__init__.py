"""
Service layer for tribler-arr-shim.
"""
from tribler_arr_shim.services.association_store import AssociationStore, TorrentAssociation
from tribler_arr_shim.services.reconciliation import ReconciliationEngine, ReconciliationResult
from tribler_arr_shim.services.state_mapper import StateMapper

__all__ = [
    "AssociationStore",
    "TorrentAssociation",
    "ReconciliationEngine",
    "ReconciliationResult",
    "StateMapper",
]
