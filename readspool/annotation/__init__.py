"""
Annotation stores for ReadSpool.

Provides read access to per-record analysis results computed by earlier runs.
"""

from .store import (
    AnnotationStore,
    AnnotationStoreError,
    InMemoryAnnotationStore,
    SqliteAnnotationStore,
    open_annotation_store,
    ordinal_key,
)

__all__ = [
    "AnnotationStore",
    "AnnotationStoreError",
    "InMemoryAnnotationStore",
    "SqliteAnnotationStore",
    "open_annotation_store",
    "ordinal_key",
]
