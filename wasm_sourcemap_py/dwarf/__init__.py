"""
DWARF debug information access.
"""

from .structures import CompilationUnit, FileEntry, LineRow, DW_LANG_Rust
from .loader import DwarfInfo

__all__ = ['CompilationUnit', 'FileEntry', 'LineRow', 'DW_LANG_Rust', 'DwarfInfo']
