"""
Line table structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple


class FuncState(Enum):
    """Per-sequence state of the line row walk."""
    START = 'start'
    IGNORED = 'ignored'
    NORMAL = 'normal'


class LineOrder(str, Enum):
    """Ordering of each file's location table."""
    ADDRESS = 'address'
    POSITION = 'position'


class Pos(NamedTuple):
    """Zero-based source position, ordered by line then column."""
    line: int
    column: int


@dataclass(frozen=True)
class LocationEntry:
    """A module-absolute address mapped to a position in a source file."""
    address: int
    pos: Pos
    file: str

    def to_triple(self) -> List[int]:
        return [self.address, self.pos.line, self.pos.column]


@dataclass
class FileEntries:
    """Locations recorded for one canonical source file."""
    file: str
    language: int
    entries: List[LocationEntry] = field(default_factory=list)


@dataclass
class UnitEntries:
    """Locations recorded by one compilation unit, grouped by file."""
    name: str
    directory: str
    files: Dict[str, FileEntries] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.files


@dataclass
class LineTables:
    """
    Post-processed resolver output.

    Attributes:
        files: Per-file tables in first-seen order
        locations: All locations sorted by address, one per address
        units: Per-unit tables for units that recorded locations
    """
    files: List[FileEntries] = field(default_factory=list)
    locations: List[LocationEntry] = field(default_factory=list)
    units: List[UnitEntries] = field(default_factory=list)
