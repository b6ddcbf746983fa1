"""
IO module for binary stream handling.
"""

from .binary_stream import BinaryStream

__all__ = ['BinaryStream']
