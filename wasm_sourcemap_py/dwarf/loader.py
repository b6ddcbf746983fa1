"""
DWARF loader backed by pyelftools.

WebAssembly carries its DWARF sections as custom sections rather than ELF
sections, so DWARFInfo is assembled directly from the raw section table
instead of going through ELFFile. Compilation units and line rows are
converted to the plain structures in .structures as they are read.
"""

from io import BytesIO
from typing import Dict, Iterator, List, Optional, Union

from elftools.common.exceptions import DWARFError, ELFError
from elftools.construct import ConstructError
from elftools.dwarf.compileunit import CompileUnit
from elftools.dwarf.dwarfinfo import DebugSectionDescriptor, DWARFInfo, DwarfConfig
from elftools.dwarf.lineprogram import LineProgram

from ..errors import DebugInfoDecodeError
from .structures import CompilationUnit, FileEntry, LineRow


# DWARFInfo keyword -> section name
DWARF_SECTIONS = {
    'debug_info_sec': '.debug_info',
    'debug_aranges_sec': '.debug_aranges',
    'debug_abbrev_sec': '.debug_abbrev',
    'debug_frame_sec': '.debug_frame',
    'debug_str_sec': '.debug_str',
    'debug_loc_sec': '.debug_loc',
    'debug_ranges_sec': '.debug_ranges',
    'debug_line_sec': '.debug_line',
    'debug_pubtypes_sec': '.debug_pubtypes',
    'debug_pubnames_sec': '.debug_pubnames',
    'debug_addr_sec': '.debug_addr',
    'debug_str_offsets_sec': '.debug_str_offsets',
    'debug_line_str_sec': '.debug_line_str',
    'debug_loclists_sec': '.debug_loclists',
    'debug_rnglists_sec': '.debug_rnglists',
    'debug_sup_sec': '.debug_sup',
    'debug_types_sec': '.debug_types',
}

# wasm32 addresses
WASM_ADDRESS_SIZE = 4

# Exceptions pyelftools raises on corrupt input: its own, construct parse
# failures, and lookups or arithmetic on bad header values
DECODE_ERRORS = (
    ELFError, DWARFError, ConstructError,
    KeyError, IndexError, ValueError, ZeroDivisionError, AttributeError, TypeError,
    NotImplementedError,
)


def _decode(value: object, what: str) -> str:
    if isinstance(value, str):
        return value
    if not isinstance(value, bytes):
        raise DebugInfoDecodeError(f"Expected a string for {what}, got {type(value).__name__}")
    try:
        return value.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DebugInfoDecodeError(f"Invalid UTF-8 in {what}: {e}") from e


def _section_descriptor(name: str, data: bytes) -> DebugSectionDescriptor:
    return DebugSectionDescriptor(
        stream=BytesIO(data),
        name=name,
        global_offset=0,
        size=len(data),
        address=0
    )


class DwarfInfo:
    """
    DWARF debug information of one WebAssembly module.

    Usage::

        dwarf = DwarfInfo(module.debug_sections)
        for unit in dwarf.iter_units():
            ...

    Sections missing from the table are treated as empty.
    """

    def __init__(self, debug_sections: Dict[str, bytes]):
        self._sections = debug_sections
        self._dwarfinfo = DWARFInfo(
            config=DwarfConfig(
                little_endian=True,
                machine_arch='wasm32',
                default_address_size=WASM_ADDRESS_SIZE
            ),
            eh_frame_sec=None,
            gnu_debugaltlink_sec=None,
            **{
                keyword: _section_descriptor(name, debug_sections.get(name, b''))
                for keyword, name in DWARF_SECTIONS.items()
            }
        )

    def iter_units(self) -> Iterator[CompilationUnit]:
        """
        Yield every compilation unit in .debug_info order.

        Raises:
            DebugInfoDecodeError: If pyelftools cannot decode the data
        """
        try:
            for cu in self._dwarfinfo.iter_CUs():
                yield self._make_unit(cu)
        except DECODE_ERRORS as e:
            raise DebugInfoDecodeError(f"Failed to decode compilation units: {e}") from e

    def _make_unit(self, cu: CompileUnit) -> CompilationUnit:
        attrs = cu.get_top_DIE().attributes

        unit = CompilationUnit()
        if 'DW_AT_name' in attrs:
            unit.name = _decode(attrs['DW_AT_name'].value, 'DW_AT_name')

        comp_dir = None
        if 'DW_AT_comp_dir' in attrs:
            comp_dir = _decode(attrs['DW_AT_comp_dir'].value, 'DW_AT_comp_dir')
            unit.comp_dir = comp_dir

        if 'DW_AT_language' in attrs and isinstance(attrs['DW_AT_language'].value, int):
            unit.language = attrs['DW_AT_language'].value

        line_program = self._dwarfinfo.line_program_for_CU(cu)
        if line_program is not None:
            unit.rows = self._iter_rows(line_program, comp_dir)
        return unit

    def _iter_rows(self, line_program: LineProgram, comp_dir: Optional[str]) -> Iterator[LineRow]:
        try:
            files = _FileTable(line_program, comp_dir)
            for entry in line_program.get_entries():
                state = entry.state
                if state is None:
                    continue
                yield LineRow(
                    address=state.address,
                    line=state.line or None,
                    column=state.column or None,
                    end_sequence=bool(state.end_sequence),
                    file=files.get(state.file)
                )
        except DECODE_ERRORS as e:
            raise DebugInfoDecodeError(f"Failed to decode line program: {e}") from e


class _FileTable:
    """Resolves line program file indices to FileEntry, with caching."""

    def __init__(self, line_program: LineProgram, comp_dir: Optional[str]):
        header = line_program.header
        self._version = header['version']
        self._entries = list(header.get('file_entry') or [])
        self._directories: List[Union[bytes, str]] = list(header.get('include_directory') or [])
        self._comp_dir = comp_dir
        self._cache: Dict[int, Optional[FileEntry]] = {}

    def get(self, index: int) -> Optional[FileEntry]:
        if index not in self._cache:
            self._cache[index] = self._resolve(index)
        return self._cache[index]

    def _resolve(self, index: int) -> Optional[FileEntry]:
        # File indices are 1-based before DWARF 5
        if self._version < 5:
            index -= 1
        if index < 0 or index >= len(self._entries):
            return None

        entry = self._entries[index]
        if entry.name is None:
            return None
        return FileEntry(
            path_name=_decode(entry.name, 'file name'),
            directory=self._directory(entry.dir_index)
        )

    def _directory(self, dir_index: Optional[int]) -> Optional[str]:
        if dir_index is None:
            return None
        if self._version < 5:
            # Directory 0 is the compilation directory
            if dir_index == 0:
                return self._comp_dir
            dir_index -= 1
        if dir_index >= len(self._directories):
            return None
        return _decode(self._directories[dir_index], 'include directory')
