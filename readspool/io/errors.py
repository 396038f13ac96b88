#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Exception types raised while opening, reading and assembling reads files.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""


class ReadSpoolError(Exception):
    """Base class for all ReadSpool errors."""
    pass


class StreamOpenError(ReadSpoolError):
    """Raised when a reads file cannot be opened for reading."""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Failed to open reads file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class StreamReadError(ReadSpoolError):
    """Raised when the line supply fails part way through a file."""

    def __init__(self, path, line_number: int, reason: str = ""):
        self.path = path
        self.line_number = line_number
        self.reason = reason
        message = f"Error reading {path} after line {line_number}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedRecordError(ReadSpoolError, ValueError):
    """
    Raised in strict mode when input violates the FASTA/FASTQ layout.

    Permissive parsing (the default) never raises this.
    """

    def __init__(self, message: str, line_number: int = 0):
        self.line_number = line_number
        if line_number:
            message = f"{message} (line {line_number})"
        super().__init__(message)
