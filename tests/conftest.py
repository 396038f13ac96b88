#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Pytest configuration and shared fixtures.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import gzip
import pytest
from pathlib import Path
import tempfile
import shutil


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="readspool_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def write_reads(temp_output_dir):
    """Factory writing text to a reads file, gzipped if the name ends in .gz."""
    def _write(content: str, name: str = "reads.fa") -> Path:
        path = temp_output_dir / name
        if name.endswith('.gz'):
            with gzip.open(path, 'wt', newline='') as f:
                f.write(content)
        else:
            path.write_bytes(content.encode('utf-8'))
        return path
    return _write


@pytest.fixture
def simple_fasta():
    """Multi-line FASTA with two records."""
    return ">r1\nACGT\nACGT\n>r2\nTTTT\n"


@pytest.fixture
def simple_fastq():
    """Generate simple FASTQ reads for testing."""
    return """@read1
ATCGATCGATCG
+
IIIIIIIIIIII
@read2
GCTAGCTAGCTA
+
@@@@IIII@@@@
@read3 sample=3
GGGG
+read3 sample=3
FFFF
"""

# ReadSpool v0.1.0
# Any usage is subject to this software's license.
