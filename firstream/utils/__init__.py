"""
Utility functions for stream filtering.

This module provides helper functions for:
- Signal validation and dtype handling
- Block layout arithmetic
"""

from firstream.utils.signals import block_layout, canonicalize_signal

__all__ = [
    "block_layout",
    "canonicalize_signal",
]
