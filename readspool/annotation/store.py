#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Annotation stores: previously computed per-record data keyed by ordinal.

Readers only ever call get()/lookup(). A missing key means nothing was
computed for that record and is returned as None, not raised.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..io.errors import ReadSpoolError

logger = logging.getLogger(__name__)


class AnnotationStoreError(ReadSpoolError):
    """Raised when an annotation store cannot be opened, read or written."""
    pass


def ordinal_key(ordinal: int) -> str:
    """Key under which the annotation of a record is stored."""
    return str(ordinal)


class AnnotationStore(ABC):
    """Read-only keyed lookup used to enrich records."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Fetch the value stored under key.

        Args:
            key: Store key

        Returns:
            Stored value, or None if absent
        """
        pass

    def lookup(self, ordinal: int) -> Optional[Any]:
        """Fetch the annotation for a record ordinal."""
        return self.get(ordinal_key(ordinal))

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class InMemoryAnnotationStore(AnnotationStore):
    """Dictionary-backed store for tests and small runs."""

    def __init__(self, data: Optional[Dict[Union[int, str], Any]] = None):
        self._data: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            self.put(key, value)

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def put(self, key: Union[int, str], value: Any):
        self._data[str(key)] = value

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"InMemoryAnnotationStore(entries={len(self._data)})"


class SqliteAnnotationStore(AnnotationStore):
    """
    SQLite-backed store holding JSON-encoded values.

    Table layout: (key TEXT PRIMARY KEY, value TEXT). Opened read-only by
    default; pass readonly=False to create the table and allow put().
    The connection is guarded by a lock so several readers may share one
    store.
    """

    def __init__(self, db_path: Union[str, Path], table: str = 'annotations',
                 readonly: bool = True):
        """
        Open the database.

        Args:
            db_path: Path to SQLite database file
            table: Table holding the annotations
            readonly: Open without write access

        Raises:
            AnnotationStoreError: If the database cannot be opened
        """
        if not table.isidentifier():
            raise AnnotationStoreError(f"Invalid annotation table name: {table}")

        self.db_path = Path(db_path)
        self.table = table
        self.readonly = readonly
        self._lock = threading.Lock()

        try:
            if readonly:
                if not self.db_path.exists():
                    raise AnnotationStoreError(f"Annotation database not found: {self.db_path}")
                uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
                self._conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            else:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
                self._conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {table} "
                    "(key TEXT PRIMARY KEY, value TEXT NOT NULL)"
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise AnnotationStoreError(f"Cannot open annotation database {self.db_path}: {e}") from e

        logger.debug(f"Opened annotation store {self.db_path} (readonly={readonly})")

    def get(self, key: str) -> Optional[Any]:
        try:
            with self._lock:
                row = self._conn.execute(
                    f"SELECT value FROM {self.table} WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise AnnotationStoreError(f"Annotation lookup failed for key {key}: {e}") from e

        if row is None:
            return None
        return json.loads(row[0])

    def put(self, key: Union[int, str], value: Any):
        """Store a JSON-serialisable value under key."""
        self.put_many([(key, value)])

    def put_many(self, items: Iterable[Tuple[Union[int, str], Any]]) -> int:
        """
        Store several values in one transaction.

        Returns:
            Number of entries written
        """
        if self.readonly:
            raise AnnotationStoreError(f"Annotation store {self.db_path} is read-only")

        rows = [(str(key), json.dumps(value)) for key, value in items]
        try:
            with self._lock, self._conn:
                self._conn.executemany(
                    f"INSERT OR REPLACE INTO {self.table} (key, value) VALUES (?, ?)",
                    rows,
                )
        except sqlite3.Error as e:
            raise AnnotationStoreError(f"Annotation write failed: {e}") from e
        return len(rows)

    def __len__(self) -> int:
        with self._lock:
            return self._conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]

    def close(self):
        with self._lock:
            self._conn.close()

    def __repr__(self) -> str:
        return f"SqliteAnnotationStore(db_path={self.db_path}, table={self.table})"


def open_annotation_store(config: Dict[str, Any]) -> Optional[AnnotationStore]:
    """
    Build the store described by the 'annotations' config section.

    Args:
        config: Full configuration dictionary

    Returns:
        AnnotationStore, or None when backend is 'none'
    """
    section = config.get('annotations', {})
    backend = section.get('backend', 'none')

    if backend == 'none':
        return None
    if backend == 'sqlite':
        if not section.get('path'):
            raise AnnotationStoreError("annotations.path is required for the sqlite backend")
        return SqliteAnnotationStore(section['path'], table=section.get('table', 'annotations'))

    raise AnnotationStoreError(f"Unknown annotation backend: {backend}")
