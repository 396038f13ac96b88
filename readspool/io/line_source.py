#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Line supply for reads files.

LineSource hands out one physical line at a time, gunzipping on the fly when
asked to. Decompression is chosen by the caller, never sniffed from content.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import gzip
import logging
import zlib
from pathlib import Path
from typing import Iterator, Optional, TextIO, Union

from .errors import StreamOpenError, StreamReadError

logger = logging.getLogger(__name__)


def trim_line(line: str) -> str:
    """
    Strip trailing whitespace and control characters, including '\\r'.

    Leading whitespace is kept.
    """
    return line.rstrip()


def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed, judged by its suffix.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    return Path(filepath).suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], gzipped: bool = False,
              encoding: str = 'utf-8') -> TextIO:
    """
    Open a reads file for text reading.

    Lines end at a line feed only; a bare carriage return stays inside the line.

    Args:
        filepath: Path to file
        gzipped: Decompress with gzip while reading
        encoding: Text encoding

    Returns:
        File handle

    Raises:
        StreamOpenError: If the file cannot be opened
    """
    filepath = Path(filepath)

    try:
        if gzipped:
            return gzip.open(filepath, 'rt', encoding=encoding, newline='\n')
        return open(filepath, 'r', encoding=encoding, newline='\n')
    except OSError as e:
        raise StreamOpenError(filepath, e.strerror or str(e)) from e


class LineSource:
    """
    One-line-at-a-time reader over a (possibly gzipped) file.

    get_line() returns None at end of stream and raises StreamReadError on
    read failure, so the two conditions are never confused.
    """

    def __init__(self, filepath: Union[str, Path], gzipped: bool = False,
                 encoding: str = 'utf-8'):
        """
        Open the file.

        Args:
            filepath: Path to reads file
            gzipped: Whether the file is gzip compressed
            encoding: Text encoding

        Raises:
            StreamOpenError: If the file cannot be opened
        """
        self.filepath = Path(filepath)
        self.gzipped = gzipped
        self.encoding = encoding
        self.lines_read = 0
        self._handle: Optional[TextIO] = open_file(self.filepath, gzipped, encoding)
        logger.debug(f"Opened {self.filepath} (gzipped={gzipped})")

    @property
    def closed(self) -> bool:
        return self._handle is None

    def get_line(self) -> Optional[str]:
        """
        Return the next physical line (newline included), or None at end.

        Raises:
            StreamReadError: If reading or decompression fails
        """
        if self._handle is None:
            return None

        try:
            line = self._handle.readline()
        except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
            raise StreamReadError(self.filepath, self.lines_read, str(e)) from e

        if not line:
            return None

        self.lines_read += 1
        return line

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.debug(f"Closed {self.filepath} after {self.lines_read} lines")

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.get_line()
            if line is None:
                return
            yield line

    def __enter__(self) -> 'LineSource':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return f"LineSource(filepath={self.filepath}, gzipped={self.gzipped})"
