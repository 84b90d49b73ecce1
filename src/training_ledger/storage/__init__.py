"""Snapshot persistence for the ledger."""

from training_ledger.storage.blob_store import BlobStore
from training_ledger.storage.codec import LoadResult, LoadStatus

__all__ = ["BlobStore", "LoadResult", "LoadStatus"]
