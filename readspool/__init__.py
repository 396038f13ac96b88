#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Package initialization and version metadata.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

from .version import __version__

__all__ = ["__version__"]

# ReadSpool v0.1.0
# Any usage is subject to this software's license.
