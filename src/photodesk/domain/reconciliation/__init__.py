"""Staged-change reconciliation and the publish protocol.

Flow:
1) ``ReconciliationStore.load`` a manifest fetched from the remote store
2) stage edits, tag changes and deletions (synchronous, no I/O)
3) ``PublishCoordinator.publish`` sweeps deleted files, re-reads the version
   tag, writes the merged manifest, and commits the store on success
"""

from __future__ import annotations

from .outcome import PublishOutcome, PublishStatus
from .publish import MANIFEST_COMMIT_MESSAGE, PublishCoordinator, fetch_manifest
from .store import ChangeKind, ReconciliationStore, StoreChange, StoreListener

__all__ = [
    "MANIFEST_COMMIT_MESSAGE",
    "ChangeKind",
    "PublishCoordinator",
    "PublishOutcome",
    "PublishStatus",
    "ReconciliationStore",
    "StoreChange",
    "StoreListener",
    "fetch_manifest",
]
