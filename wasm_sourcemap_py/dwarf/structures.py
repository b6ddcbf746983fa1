"""
DWARF structures consumed by the line table resolver.

These are the only shapes the resolver depends on; the pyelftools-backed
loader produces them, and tests can build them directly.
"""

from dataclasses import dataclass
from typing import Iterable, Optional


# DW_AT_language values
DW_LANG_C89 = 0x0001
DW_LANG_C = 0x0002
DW_LANG_C_plus_plus = 0x0004
DW_LANG_C99 = 0x000c
DW_LANG_Rust = 0x001c
DW_LANG_C11 = 0x001d
DW_LANG_C_plus_plus_14 = 0x0021


@dataclass(frozen=True)
class FileEntry:
    """A line program file entry with its strings resolved."""
    path_name: str
    directory: Optional[str] = None


@dataclass(frozen=True)
class LineRow:
    """
    One row of a line-number program.

    Attributes:
        address: Instruction address relative to the code section
        line: 1-based line, or None when the row has no line
        column: 1-based column, or None for the left edge
        end_sequence: True on the row closing a sequence
        file: Resolved file entry, or None when the index is unknown
    """
    address: int
    line: Optional[int] = None
    column: Optional[int] = None
    end_sequence: bool = False
    file: Optional[FileEntry] = None


@dataclass
class CompilationUnit:
    """A compilation unit and its line rows (None without a line program)."""
    name: str = ""
    comp_dir: str = ""
    language: int = 0
    rows: Optional[Iterable[LineRow]] = None

    @property
    def has_line_program(self) -> bool:
        return self.rows is not None
