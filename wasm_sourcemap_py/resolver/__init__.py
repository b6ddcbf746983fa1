"""
Line table resolution.
"""

from .structures import Pos, LocationEntry, FileEntries, UnitEntries, LineTables, LineOrder, FuncState
from .line_table import LineTableBuilder, resolve, file_key

__all__ = [
    'Pos', 'LocationEntry', 'FileEntries', 'UnitEntries', 'LineTables', 'LineOrder', 'FuncState',
    'LineTableBuilder', 'resolve', 'file_key'
]
