"""
Line table resolver.

Walks the line-number program of every compilation unit and turns its rows
into module-absolute, zero-based source locations grouped by source file.

Some toolchains leave sequences for functions removed by the linker in the
line program, with their addresses reset to 0. A sequence whose first row
is at address 0 is therefore dropped up to its end_sequence row.
"""

from operator import attrgetter
from typing import Callable, Dict, Iterable, List, Union

from ..dwarf.structures import CompilationUnit, FileEntry, LineRow, DW_LANG_Rust
from ..errors import InternalInconsistencyError
from ..utils.path import SourcePath
from .structures import (
    FileEntries, FuncState, LineOrder, LineTables, LocationEntry, Pos, UnitEntries
)


def _dedup_sorted(entries: Iterable[LocationEntry], key: Callable) -> List[LocationEntry]:
    """Drop entries whose key equals the key of the entry kept before them."""
    result: List[LocationEntry] = []
    last = None
    for entry in entries:
        current = key(entry)
        if result and current == last:
            continue
        result.append(entry)
        last = current
    return result


def file_key(file: FileEntry) -> str:
    """Canonical path of a line program file entry."""
    path = SourcePath('.')
    if file.directory is not None:
        path = SourcePath(file.directory)
    path.push(file.path_name)
    return str(path)


def _get_file_entries(files: Dict[str, FileEntries], key: str, language: int) -> FileEntries:
    entries = files.get(key)
    if entries is None:
        entries = files[key] = FileEntries(file=key, language=language)
    return entries


class LineTableBuilder:
    """
    Accumulates locations across compilation units.

    A builder serves a single resolve run: feed every unit to add_unit(),
    then call finish() once.

    Attributes:
        code_section_offset: Added to every row address
        unit_count: Units that had a line program
        skipped_unit_count: Units without a line program
        ignored_row_count: Rows dropped as part of placeholder sequences
    """

    def __init__(self, code_section_offset: int):
        self.code_section_offset = code_section_offset
        self.unit_count = 0
        self.skipped_unit_count = 0
        self.ignored_row_count = 0
        self._locations: List[LocationEntry] = []
        self._files: Dict[str, FileEntries] = {}
        self._units: List[UnitEntries] = []

    def add_unit(self, unit: CompilationUnit) -> None:
        """Run the row walk over one compilation unit."""
        if unit.rows is None:
            self.skipped_unit_count += 1
            return
        self.unit_count += 1

        # rustc emits columns one below their DWARF value
        # (https://github.com/rust-lang/rust/issues/65437)
        column_bias = 1 if unit.language == DW_LANG_Rust else 0

        unit_entries = UnitEntries(name=unit.name, directory=unit.comp_dir)
        self._units.append(unit_entries)

        state = FuncState.START
        for row in unit.rows:
            if state is FuncState.START:
                state = FuncState.IGNORED if row.address == 0 else FuncState.NORMAL

            if state is FuncState.NORMAL:
                self._add_row(row, unit.language, column_bias, unit_entries)
            else:
                self.ignored_row_count += 1

            if row.end_sequence:
                state = FuncState.START

    def _add_row(self, row: LineRow, language: int, column_bias: int, unit_entries: UnitEntries) -> None:
        if row.line is None or row.file is None:
            return

        if row.line < 1:
            raise InternalInconsistencyError(
                f"Line {row.line} at address 0x{row.address:x} is not 1-based"
            )

        if row.column is None:
            column = 0
        else:
            column = row.column - 1 + column_bias

        key = file_key(row.file)
        location = LocationEntry(
            address=self.code_section_offset + row.address,
            pos=Pos(row.line - 1, column),
            file=key
        )

        self._locations.append(location)
        _get_file_entries(self._files, key, language).entries.append(location)
        _get_file_entries(unit_entries.files, key, language).entries.append(location)

    def finish(self, line_order: Union[LineOrder, str] = LineOrder.ADDRESS) -> LineTables:
        """
        Sort and deduplicate the accumulated tables.

        Args:
            line_order: 'address' to emit each file's table in address
                order, drawn from the address-deduplicated global table;
                'position' to emit it in (line, column) order

        Returns:
            The post-processed LineTables
        """
        line_order = LineOrder(line_order)

        # sorted() is stable, so the first row claiming an address wins
        locations = _dedup_sorted(sorted(self._locations, key=attrgetter('address')), attrgetter('address'))

        if line_order is LineOrder.ADDRESS:
            files = self._files_by_address(locations)
        else:
            files = self._files_by_position()

        units = []
        for unit in self._units:
            if unit.is_empty:
                continue
            resolved = UnitEntries(name=unit.name, directory=unit.directory)
            for key, file_entries in unit.files.items():
                entries = sorted(file_entries.entries, key=attrgetter('address'))
                resolved.files[key] = FileEntries(
                    file=key,
                    language=file_entries.language,
                    entries=_dedup_sorted(entries, attrgetter('address'))
                )
            units.append(resolved)

        return LineTables(files=files, locations=locations, units=units)

    def _files_by_address(self, locations: List[LocationEntry]) -> List[FileEntries]:
        files = {key: FileEntries(file=key, language=entries.language) for key, entries in self._files.items()}
        seen: Dict[str, set] = {key: set() for key in files}
        for location in locations:
            positions = seen.get(location.file)
            if positions is None:
                raise InternalInconsistencyError(f"Location at 0x{location.address:x} has unknown file {location.file!r}")
            if location.pos in positions:
                continue
            positions.add(location.pos)
            files[location.file].entries.append(location)
        return list(files.values())

    def _files_by_position(self) -> List[FileEntries]:
        files = []
        for key, file_entries in self._files.items():
            entries = sorted(file_entries.entries, key=attrgetter('pos'))
            files.append(FileEntries(
                file=key,
                language=file_entries.language,
                entries=_dedup_sorted(entries, attrgetter('pos'))
            ))
        return files


def resolve(
    units: Iterable[CompilationUnit],
    code_section_offset: int,
    line_order: Union[LineOrder, str] = LineOrder.ADDRESS
) -> LineTables:
    """
    Resolve the line programs of all units into location tables.

    Args:
        units: Compilation units, consumed once
        code_section_offset: Offset of the code section payload in the module
        line_order: Ordering of each file's table, see LineTableBuilder.finish

    Returns:
        The post-processed LineTables
    """
    builder = LineTableBuilder(code_section_offset)
    for unit in units:
        builder.add_unit(unit)
    return builder.finish(line_order)
