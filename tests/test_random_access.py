#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Tests for loading records by ordinal.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import pytest

from readspool.annotation import InMemoryAnnotationStore
from readspool.io import (
    RandomAccessLoader,
    SequentialReader,
    StreamOpenError,
)
from readspool.io import reader as reader_module


class TestRandomAccessEquivalence:
    """Test load(k) returns the k-th record of a sequential pass."""

    @pytest.mark.parametrize("name,fixture", [
        ("reads.fq", "simple_fastq"),
        ("reads.fa", "simple_fasta"),
        ("reads.fq.gz", "simple_fastq"),
    ])
    def test_every_ordinal(self, request, write_reads, name, fixture):
        """Test every valid ordinal against the sequential reader."""
        path = write_reads(request.getfixturevalue(fixture), name)
        gzipped = name.endswith('.gz')

        with SequentialReader.open(path, gzipped=gzipped) as reader:
            sequential = list(reader)

        loader = RandomAccessLoader(path, gzipped=gzipped)
        for expected in sequential:
            loaded = loader.load(expected.ordinal)
            assert loaded == expected

    def test_quality_lines_with_marker_do_not_shift_ordinals(self, write_reads):
        """Test '@'-leading quality lines are not counted as headers."""
        content = "@r1\nAC\n+\n@@\n@r2\nGG\n+\n@I\n@r3\nTT\n+\nII\n"
        loader = RandomAccessLoader(write_reads(content, "reads.fq"))

        assert loader.load(2).header == "@r2"
        assert loader.load(3).header == "@r3"
        assert loader.load(3).ordinal == 3

    def test_blank_lines_do_not_shift_ordinals(self, write_reads):
        loader = RandomAccessLoader(write_reads("\n>r1\n\nA\n\n\n>r2\nC\n\n"))
        assert loader.load(2).sequence == "C"


class TestRandomAccessEdgeCases:
    """Test not-found and invalid ordinals."""

    def test_ordinal_past_end(self, write_reads, simple_fasta):
        assert RandomAccessLoader(write_reads(simple_fasta)).load(3) is None

    def test_no_header_file(self, write_reads):
        assert RandomAccessLoader(write_reads("ACGT\n")).load(1) is None

    @pytest.mark.parametrize("ordinal", [0, -1])
    def test_invalid_ordinal(self, write_reads, simple_fasta, ordinal):
        with pytest.raises(ValueError):
            RandomAccessLoader(write_reads(simple_fasta)).load(ordinal)

    def test_missing_file(self, temp_output_dir):
        loader = RandomAccessLoader(temp_output_dir / "missing.fa")
        with pytest.raises(StreamOpenError):
            loader.load(1)

    def test_enriches_from_store(self, write_reads, simple_fasta):
        store = InMemoryAnnotationStore({2: ["tax:9606"]})
        loader = RandomAccessLoader(write_reads(simple_fasta), store=store)

        assert loader.load(2).annotation == ["tax:9606"]
        assert loader.load(1).annotation is None


class TestRandomAccessStreams:
    """Test stream ownership."""

    def test_stream_closed_after_each_call(self, write_reads, simple_fasta, monkeypatch):
        """Test the loader closes its stream whether or not the record is found."""
        opened = []

        class TrackingSource(reader_module.LineSource):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                opened.append(self)

        monkeypatch.setattr(reader_module, "LineSource", TrackingSource)
        loader = RandomAccessLoader(write_reads(simple_fasta))

        loader.load(1)
        loader.load(5)

        assert len(opened) == 2
        assert all(source.closed for source in opened)

    def test_runs_alongside_sequential_reader(self, write_reads, simple_fastq):
        """Test a load does not disturb an open sequential traversal."""
        path = write_reads(simple_fastq, "reads.fq")
        loader = RandomAccessLoader(path)

        with SequentialReader.open(path) as reader:
            first = reader.next_record()
            assert loader.load(3).name == "read3"
            second = reader.next_record()

        assert (first.ordinal, second.ordinal) == (1, 2)
        assert second.name == "read2"
