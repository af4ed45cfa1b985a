"""
Adapters package
----------------

Storage and run-metadata abstractions, so the same analysis code reads
its inputs from a local directory or from S3.
"""

from .storage import (  # noqa: F401
    LocalStorageAdapter,
    S3StorageAdapter,
    StorageAdapter,
)
from .metadata import (  # noqa: F401
    LocalMetadataAdapter,
    MetadataAdapter,
)

__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "MetadataAdapter",
    "LocalMetadataAdapter",
]
