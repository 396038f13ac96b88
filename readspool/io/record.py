#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Core record data structures.

A Record is one parsed unit of a reads file: a header, the sequence and,
for FASTQ, the quality line. Records are immutable once handed out by a
reader; readers attach the ordinal and annotation with dataclasses.replace().

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord


FASTA_HEADER_START = '>'
FASTQ_HEADER_START = '@'


class SeqFormat(Enum):
    """Record format, decided once from the marker character of the header."""
    FASTA = "fasta"
    FASTQ = "fastq"

    @property
    def marker(self) -> str:
        """Header marker character for this format."""
        return FASTA_HEADER_START if self is SeqFormat.FASTA else FASTQ_HEADER_START

    @classmethod
    def from_marker(cls, char: str) -> Optional['SeqFormat']:
        """
        Map a header marker to its format.

        Args:
            char: First character of a line

        Returns:
            SeqFormat, or None if the character does not mark a header
        """
        if char == FASTA_HEADER_START:
            return cls.FASTA
        if char == FASTQ_HEADER_START:
            return cls.FASTQ
        return None


@dataclass(frozen=True)
class Record:
    """
    Sequence record assembled from a FASTA or FASTQ file.

    Attributes:
        header: Full header line including its '>' or '@' marker
        sequence: Concatenated sequence lines
        format: Record format (None only for the empty sentinel)
        quality: FASTQ quality line (None for FASTA)
        ordinal: 1-based position in the file (0 until assigned by a reader)
        annotation: Previously computed data from the annotation store
    """
    header: str = ""
    sequence: str = ""
    format: Optional[SeqFormat] = None
    quality: Optional[str] = None
    ordinal: int = 0
    annotation: Optional[Any] = None

    @classmethod
    def empty(cls) -> 'Record':
        """Sentinel returned once a stream has no more records."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """True until a header line has been assigned."""
        return not self.header

    @property
    def is_fastq(self) -> bool:
        return self.format is SeqFormat.FASTQ

    @property
    def name(self) -> str:
        """Read identifier: header without its marker, up to the first whitespace."""
        body = self.header[1:]
        parts = body.split(maxsplit=1)
        return parts[0] if parts else ""

    @property
    def description(self) -> str:
        """Header text following the identifier."""
        parts = self.header[1:].split(maxsplit=1)
        return parts[1] if len(parts) > 1 else ""

    @property
    def length(self) -> int:
        return len(self.sequence)

    def to_fasta_string(self, line_width: int = 0) -> str:
        """
        Convert to FASTA format string.

        Args:
            line_width: Bases per sequence line (0 = single line)

        Returns:
            FASTA text, header marker normalised to '>'
        """
        lines = [FASTA_HEADER_START + self.header[1:]]
        if line_width > 0:
            for i in range(0, len(self.sequence), line_width):
                lines.append(self.sequence[i:i + line_width])
        else:
            lines.append(self.sequence)
        return "\n".join(lines) + "\n"

    def to_fastq_string(self) -> str:
        """
        Convert to FASTQ format string (4 lines).

        FASTA records get a placeholder quality of 'I' per base.
        """
        quality = self.quality if self.quality is not None else 'I' * self.length
        return f"{FASTQ_HEADER_START}{self.header[1:]}\n{self.sequence}\n+\n{quality}\n"

    def to_seqrecord(self) -> SeqRecord:
        """
        Convert to a Biopython SeqRecord.

        Quality is decoded from Phred+33 into the 'phred_quality' letter
        annotation.

        Raises:
            ValueError: If the quality and sequence lengths disagree
        """
        letter_annotations = {}
        if self.quality is not None:
            if len(self.quality) != self.length:
                raise ValueError(
                    f"Quality length {len(self.quality)} does not match "
                    f"sequence length {self.length} for {self.name}"
                )
            letter_annotations["phred_quality"] = [ord(c) - 33 for c in self.quality]

        return SeqRecord(
            Seq(self.sequence),
            id=self.name,
            description=self.description,
            letter_annotations=letter_annotations,
        )

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        fmt = self.format.value if self.format else None
        return (f"Record(ordinal={self.ordinal}, name='{self.name}', "
                f"format={fmt}, length={self.length})")
