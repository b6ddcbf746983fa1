"""
Source map output documents.

These structures define the JSON documents handed to debuggers. Three
shapes are produced from the same LineTables:

- grouped: one entry per source file with its [address, line, column] rows
- compact: a file list plus one [address, fileIndex, line, column] row per
  address, taken from the module-wide address table
- units: grouped files nested under their compilation unit
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import json

from ..errors import InternalInconsistencyError
from ..resolver.structures import FileEntries, LineTables


class OutputFormat(str, Enum):
    """Supported document shapes."""
    GROUPED = 'grouped'
    COMPACT = 'compact'
    UNITS = 'units'


class Document(ABC):
    """Base for JSON output documents."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    def to_json(self, indent: Optional[int] = None) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass
class SourceFile:
    """Line table of one source file."""
    file: str = ""
    language: int = 0
    lines: List[List[int]] = field(default_factory=list)

    @classmethod
    def from_entries(cls, entries: FileEntries) -> 'SourceFile':
        return cls(
            file=entries.file,
            language=entries.language,
            lines=[location.to_triple() for location in entries.entries]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "language": self.language,
            "lines": self.lines
        }


@dataclass
class SourceMap(Document):
    """Grouped-by-file source map."""
    files: List[SourceFile] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [f.to_dict() for f in self.files]
        }


@dataclass
class CompactSourceMap(Document):
    """Single address table referencing files by index."""
    files: List[str] = field(default_factory=list)
    locations: List[List[int]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": self.files,
            "locations": self.locations
        }


@dataclass
class SourceUnit:
    """Files of one compilation unit."""
    name: str = ""
    directory: str = ""
    files: List[SourceFile] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "directory": self.directory,
            "files": [f.to_dict() for f in self.files]
        }


@dataclass
class UnitSourceMap(Document):
    """Source map grouped by compilation unit."""
    units: List[SourceUnit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "units": [u.to_dict() for u in self.units]
        }


@dataclass
class ErrorDocument(Document):
    """Document emitted instead of a source map when extraction fails."""
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error
        }


def _compact(tables: LineTables) -> CompactSourceMap:
    files = [entries.file for entries in tables.files]
    file_indices = {name: index for index, name in enumerate(files)}

    result = CompactSourceMap(files=files)
    for location in tables.locations:
        index = file_indices.get(location.file)
        if index is None:
            raise InternalInconsistencyError(f"File {location.file!r} missing from the file index")
        result.locations.append([location.address, index, location.pos.line, location.pos.column])
    return result


def assemble(tables: LineTables, output_format: Union[OutputFormat, str] = OutputFormat.GROUPED) -> Document:
    """
    Build the output document for resolved line tables.

    Args:
        tables: Resolver output
        output_format: 'grouped', 'compact' or 'units'

    Returns:
        The document, ready for to_json()
    """
    output_format = OutputFormat(output_format)

    if output_format is OutputFormat.COMPACT:
        return _compact(tables)

    if output_format is OutputFormat.UNITS:
        return UnitSourceMap(units=[
            SourceUnit(
                name=unit.name,
                directory=unit.directory,
                files=[SourceFile.from_entries(entries) for entries in unit.files.values()]
            )
            for unit in tables.units
        ])

    return SourceMap(files=[SourceFile.from_entries(entries) for entries in tables.files])
