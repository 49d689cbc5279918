"""
Repositories Layer
In-memory CRM state and its snapshot persistence.
"""
from .snapshot import SnapshotFile, StoreSnapshot
from .store import CRMStore, CRMError, AccountNotFoundError
from .seed import build_seed

__all__ = [
    "SnapshotFile",
    "StoreSnapshot",
    "CRMStore",
    "CRMError",
    "AccountNotFoundError",
    "build_seed",
]
