#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ReadSpool: incremental FASTA/FASTQ record reader

Streams sequence records one at a time from plain or gzipped FASTA/FASTQ
files, relocates records by ordinal, and enriches them with annotations
from a key-value store.

Version: 0.1
License: MIT (see LICENSE)
"""

from setuptools import setup, find_packages
import os
import sys

# Ensure we can import version
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "readspool"))

from version import __version__

# Read long description from README
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

# Read requirements from requirements.txt
def read_requirements(filename):
    """Read requirements from file."""
    filepath = os.path.join(os.path.dirname(__file__), filename)
    if not os.path.exists(filepath):
        return []
    with open(filepath, "r") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]

install_requires = read_requirements("requirements.txt")

extras_require = {
    "dev": read_requirements("requirements-dev.txt"),
}

setup(
    name="readspool",
    version=__version__,
    author="ReadSpool Development Team",
    description="Incremental FASTA/FASTQ record reader with annotation enrichment",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "readspool=readspool.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords="fasta fastq reads parser bioinformatics gzip",
)
