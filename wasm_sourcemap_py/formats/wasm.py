"""
WebAssembly (WASM) container scanner.

Only the section framing is decoded: the code section is located so that
code-relative DWARF addresses can be biased to module offsets, and the
custom sections holding DWARF data are collected by name. Nothing inside
the standard sections is interpreted.
"""

from typing import Dict, Iterator, List, Optional, Union

from ..errors import (
    InvalidMagicError, MalformedEncodingError,
    MissingCodeSectionError, UnsupportedVersionError
)
from ..io.binary_stream import BinaryStream
from .wasm_structures import WasmSection, WasmSectionId, WASM_MAGIC, WASM_VERSION


def _read_header(stream: BinaryStream) -> None:
    magic = stream.read_uint32()
    if magic != WASM_MAGIC:
        raise InvalidMagicError()

    version = stream.read_uint32()
    if version != WASM_VERSION:
        raise UnsupportedVersionError(version)


def _read_section(stream: BinaryStream) -> WasmSection:
    """Read one section starting at the current stream position."""
    start = stream.position
    section_id = stream.read_uleb128()
    if section_id > 0xFF:
        raise MalformedEncodingError(f"Section id {section_id} at 0x{start:x} does not fit in a byte")

    size = stream.read_uleb128()
    offset = stream.position
    payload = stream.sub_stream(size)

    section = WasmSection(id=section_id)
    if section_id == WasmSectionId.CUSTOM:
        section.name = payload.read_name()
        offset += payload.position
    section.offset = offset
    section.size = payload.remaining
    section.payload = payload.read_view(payload.remaining)
    return section


def iter_sections(data: Union[bytes, bytearray, memoryview]) -> Iterator[WasmSection]:
    """
    Scan a WebAssembly module into its sections.

    The header is validated before this returns; sections are then framed
    lazily, one per iteration, until the end of the buffer.

    Args:
        data: The whole module

    Returns:
        An iterator of WasmSection records whose payloads alias data

    Raises:
        InvalidMagicError: If the magic number does not match
        UnsupportedVersionError: If the version is not 1
        MalformedEncodingError: On truncated or badly encoded input
    """
    stream = BinaryStream(data)
    _read_header(stream)
    return _iter_section_stream(stream)


def _iter_section_stream(stream: BinaryStream) -> Iterator[WasmSection]:
    while not stream.is_empty():
        yield _read_section(stream)


class WebAssembly:
    """
    Scanned WebAssembly module.

    Holds the code section location and the DWARF custom sections.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._data = data
        self._sections: List[WasmSection] = []
        self._code_section: Optional[WasmSection] = None
        self.debug_sections: Dict[str, bytes] = {}
        self._load()

    def _load(self) -> None:
        """Scan the module once, keeping only what the resolver needs."""
        for section in iter_sections(self._data):
            self._sections.append(section)

            if section.is_debug:
                self.debug_sections[section.name] = section.payload.tobytes()
            elif section.id == WasmSectionId.CODE:
                self._code_section = section

    @property
    def sections(self) -> List[WasmSection]:
        return self._sections

    @property
    def has_code_section(self) -> bool:
        return self._code_section is not None

    @property
    def code_section_offset(self) -> int:
        """Absolute offset of the code section payload within the module."""
        if self._code_section is None:
            raise MissingCodeSectionError()
        return self._code_section.offset
