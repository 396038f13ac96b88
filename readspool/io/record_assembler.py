#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Record assembly state machine.

Consumes trimmed lines and produces completed Records. FASTA sequences may
wrap over any number of lines; FASTQ records are exactly four non-blank
lines (header, sequence, separator, quality) and are handled positionally,
so quality strings starting with '@' or '>' are never mistaken for headers.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import logging
from typing import List, Optional

from .errors import MalformedRecordError
from .record import Record, SeqFormat

logger = logging.getLogger(__name__)

# fastq: 0(header), 1(seq), 2(+), 3(quality)
FASTQ_SEQUENCE_LINE = 1
FASTQ_SEPARATOR_LINE = 2
FASTQ_QUALITY_LINE = 3


class RecordAssembler:
    """
    Assemble Records from a stream of trimmed lines.

    feed() returns None while more input is needed and the completed Record
    once the next header arrives. finish() flushes the last record at end of
    stream. Ordinals are left at 0; readers assign them.

    In the default permissive mode, content before the first header, FASTQ
    length mismatches and truncated FASTQ records are accepted or silently
    dropped. strict=True turns each of these into MalformedRecordError.
    """

    def __init__(self, strict: bool = False):
        """
        Initialize assembler.

        Args:
            strict: Raise MalformedRecordError on layout violations
        """
        self.strict = strict
        self.lines_consumed = 0
        self._reset_pending()

    def _reset_pending(self):
        self.current_format: Optional[SeqFormat] = None
        self.line_index_in_record = 0
        self._header = ""
        self._chunks: List[str] = []
        self._quality: Optional[str] = None

    @property
    def has_pending(self) -> bool:
        """True while a record is in progress."""
        return bool(self._header)

    def feed(self, line: str) -> Optional[Record]:
        """
        Feed one trimmed line.

        Args:
            line: Line with trailing whitespace already removed

        Returns:
            Completed Record when this line closes one, else None

        Raises:
            MalformedRecordError: In strict mode, on layout violations
        """
        if not line:
            return None

        self.lines_consumed += 1

        if self.current_format is SeqFormat.FASTQ:
            return self._feed_fastq(line)

        header_format = SeqFormat.from_marker(line[0])
        if header_format is not None:
            return self._start_record(line, header_format)

        if not self.has_pending:
            self._discard(line, "content before first header")
            return None

        # FASTA: unconditional multi-line append
        self._chunks.append(line)
        return None

    def _feed_fastq(self, line: str) -> Optional[Record]:
        if self.line_index_in_record == FASTQ_QUALITY_LINE:
            header_format = SeqFormat.from_marker(line[0])
            if header_format is None:
                self._discard(line, "content after complete FASTQ record")
                return None
            return self._start_record(line, header_format)

        self.line_index_in_record += 1

        if self.line_index_in_record == FASTQ_SEQUENCE_LINE:
            self._chunks.append(line)
        elif self.line_index_in_record == FASTQ_SEPARATOR_LINE:
            if self.strict and not line.startswith('+'):
                raise MalformedRecordError(
                    f"Expected FASTQ separator line starting with '+' in {self._header}",
                    self.lines_consumed,
                )
        else:
            self._quality = line

        return None

    def _start_record(self, header: str, header_format: SeqFormat) -> Optional[Record]:
        completed = self._complete() if self.has_pending else None

        self.current_format = header_format
        self._header = header
        self.line_index_in_record = 0

        return completed

    def finish(self) -> Optional[Record]:
        """
        Signal end of stream.

        Returns:
            The record still in progress, or None if there is none
        """
        if not self.has_pending:
            return None
        return self._complete()

    def _complete(self) -> Record:
        record = Record(
            header=self._header,
            sequence="".join(self._chunks),
            format=self.current_format,
            quality=self._quality if self.current_format is SeqFormat.FASTQ else None,
        )

        if self.strict and record.is_fastq:
            self._check_fastq(record)

        self._reset_pending()
        return record

    def _check_fastq(self, record: Record):
        if self.line_index_in_record != FASTQ_QUALITY_LINE:
            raise MalformedRecordError(
                f"Truncated FASTQ record {record.header}: "
                f"{self.line_index_in_record + 1} of 4 lines",
                self.lines_consumed,
            )
        if len(record.quality) != record.length:
            raise MalformedRecordError(
                f"Quality length {len(record.quality)} differs from sequence "
                f"length {record.length} in {record.header}",
                self.lines_consumed,
            )

    def _discard(self, line: str, reason: str):
        if self.strict:
            raise MalformedRecordError(f"Unexpected line ({reason}): {line[:40]}",
                                       self.lines_consumed)
        logger.debug(f"Discarding line {self.lines_consumed} ({reason})")

    def reset(self):
        """Drop any record in progress and zero the line counter."""
        self.lines_consumed = 0
        self._reset_pending()

    def __repr__(self) -> str:
        fmt = self.current_format.value if self.current_format else None
        return (f"RecordAssembler(format={fmt}, pending={self.has_pending}, "
                f"lines={self.lines_consumed})")
