"""
Read I/O module for ReadSpool.

Turns FASTA/FASTQ files (optionally gzipped) into Records one at a time.

MODULES:
- line_source.py: LineSource, line trimming, gzip-aware opening
- record.py: SeqFormat and Record
- record_assembler.py: RecordAssembler state machine
- reader.py: SequentialReader and RandomAccessLoader
- errors.py: exception types
"""

from .errors import (
    ReadSpoolError,
    StreamOpenError,
    StreamReadError,
    MalformedRecordError,
)
from .line_source import LineSource, trim_line, is_gzipped, open_file
from .record import Record, SeqFormat
from .record_assembler import RecordAssembler
from .reader import SequentialReader, RandomAccessLoader, assemble_records

__all__ = [
    # Errors
    "ReadSpoolError",
    "StreamOpenError",
    "StreamReadError",
    "MalformedRecordError",

    # Line supply
    "LineSource",
    "trim_line",
    "is_gzipped",
    "open_file",

    # Records
    "Record",
    "SeqFormat",
    "RecordAssembler",

    # Readers
    "SequentialReader",
    "RandomAccessLoader",
    "assemble_records",
]
