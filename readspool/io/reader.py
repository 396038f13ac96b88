#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Sequential and random-access readers.

SequentialReader walks an open stream once, returning one enriched Record
per call. RandomAccessLoader finds a record by ordinal by re-scanning the
file from the start. There is no persisted offset index, so every load()
costs a pass over the file up to the target; use it for occasional lookups
only, never as the main traversal.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Union

from .line_source import LineSource, trim_line
from .record import Record
from .record_assembler import RecordAssembler

if TYPE_CHECKING:
    from ..annotation.store import AnnotationStore

logger = logging.getLogger(__name__)


def assemble_records(source: LineSource, assembler: RecordAssembler) -> Iterator[Record]:
    """
    Drive an assembler over a line source.

    Records are yielded as soon as they complete; ordinals are not assigned.

    Args:
        source: Open line source
        assembler: Assembler to feed

    Yields:
        Completed records in file order

    Raises:
        StreamReadError: If the source fails mid-stream
    """
    while True:
        line = source.get_line()
        if line is None:
            break
        record = assembler.feed(trim_line(line))
        if record is not None:
            yield record

    last = assembler.finish()
    if last is not None:
        yield last


def _enrich(record: Record, ordinal: int, store: Optional['AnnotationStore']) -> Record:
    annotation = store.lookup(ordinal) if store is not None else None
    return replace(record, ordinal=ordinal, annotation=annotation)


class SequentialReader:
    """
    Return the records of one stream in file order, one per call.

    Each record gets the next ordinal (starting at 1) and whatever the
    annotation store holds for that ordinal. Once the stream is exhausted,
    next_record() returns the empty sentinel (Record.empty()).

    A reader owns its stream; do not share one across threads.
    """

    def __init__(self, source: LineSource, store: Optional['AnnotationStore'] = None,
                 strict: bool = False, name: str = "reader"):
        """
        Initialize reader.

        Args:
            source: Open line source (owned and closed by this reader)
            store: Annotation store to enrich records from (optional)
            strict: Reject malformed records instead of tolerating them
            name: Label used in log messages
        """
        self.source = source
        self.store = store
        self.name = name
        self.assembler = RecordAssembler(strict=strict)
        self.record_count = 0
        self.is_done = False
        self._records = assemble_records(source, self.assembler)

    @classmethod
    def open(cls, filepath: Union[str, Path], gzipped: bool = False,
             encoding: str = 'utf-8', strict: bool = False,
             store: Optional['AnnotationStore'] = None) -> 'SequentialReader':
        """
        Open a reads file and return a reader over it.

        Raises:
            StreamOpenError: If the file cannot be opened
        """
        source = LineSource(filepath, gzipped=gzipped, encoding=encoding)
        return cls(source, store=store, strict=strict, name=Path(filepath).name)

    @property
    def line_count(self) -> int:
        """Non-blank lines consumed so far."""
        return self.assembler.lines_consumed

    def next_record(self) -> Record:
        """
        Return the next record, or the empty sentinel when none remain.

        Raises:
            StreamReadError: If the underlying stream fails
            MalformedRecordError: In strict mode, on malformed input
        """
        if self.is_done:
            return Record.empty()

        try:
            record = next(self._records, None)
        except Exception:
            self.is_done = True
            raise

        if record is None:
            self.is_done = True
            logger.debug(f"{self.name}: done, {self.record_count} records "
                         f"from {self.line_count} lines")
            return Record.empty()

        self.record_count += 1
        return _enrich(record, self.record_count, self.store)

    def close(self):
        self.is_done = True
        self.source.close()

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        record = self.next_record()
        if record.is_empty:
            raise StopIteration
        return record

    def __enter__(self) -> 'SequentialReader':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return (f"SequentialReader(name='{self.name}', records={self.record_count}, "
                f"done={self.is_done})")


class RandomAccessLoader:
    """
    Load a single record by ordinal with a linear re-scan of the file.

    Every call opens an independent stream, so a loader can run alongside a
    SequentialReader on the same file.
    """

    def __init__(self, filepath: Union[str, Path], gzipped: bool = False,
                 encoding: str = 'utf-8', strict: bool = False,
                 store: Optional['AnnotationStore'] = None):
        """
        Initialize loader.

        Args:
            filepath: Path to reads file
            gzipped: Whether the file is gzip compressed
            encoding: Text encoding
            strict: Reject malformed records instead of tolerating them
            store: Annotation store to enrich the loaded record from (optional)
        """
        self.filepath = Path(filepath)
        self.gzipped = gzipped
        self.encoding = encoding
        self.strict = strict
        self.store = store

    def load(self, target_ordinal: int) -> Optional[Record]:
        """
        Load the record at a 1-based ordinal.

        Args:
            target_ordinal: Position of the record in the file

        Returns:
            The record, or None if the file holds fewer records

        Raises:
            ValueError: If target_ordinal < 1
            StreamOpenError: If the file cannot be opened
            StreamReadError: If the stream fails while scanning
        """
        if target_ordinal < 1:
            raise ValueError(f"Record ordinal must be >= 1, got {target_ordinal}")

        start = time.perf_counter()
        found = None
        header_count = 0

        with LineSource(self.filepath, self.gzipped, self.encoding) as source:
            assembler = RecordAssembler(strict=self.strict)
            for record in assemble_records(source, assembler):
                header_count += 1
                if header_count == target_ordinal:
                    found = _enrich(record, target_ordinal, self.store)
                    break

        elapsed = time.perf_counter() - start
        if found is None:
            logger.debug(f"Record {target_ordinal} not found in {self.filepath} "
                         f"({header_count} records, {elapsed:.2f}s)")
        else:
            logger.debug(f"Loaded record {target_ordinal} from {self.filepath} "
                         f"in {elapsed:.2f}s")
        return found

    def __repr__(self) -> str:
        return f"RandomAccessLoader(filepath={self.filepath}, gzipped={self.gzipped})"
