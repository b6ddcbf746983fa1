"""
WebAssembly format structure definitions.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional


# WebAssembly Magic and version
WASM_MAGIC = 0x6D736100  # "\0asm"
WASM_VERSION = 1

# Prefix shared by every DWARF section name
DEBUG_SECTION_PREFIX = ".debug_"


class WasmSectionId(IntEnum):
    """WebAssembly section IDs."""
    CUSTOM = 0
    TYPE = 1
    IMPORT = 2
    FUNCTION = 3
    TABLE = 4
    MEMORY = 5
    GLOBAL = 6
    EXPORT = 7
    START = 8
    ELEMENT = 9
    CODE = 10
    DATA = 11
    DATA_COUNT = 12


@dataclass
class WasmSection:
    """WebAssembly section."""
    id: int = 0
    size: int = 0
    offset: int = 0  # File offset where section payload starts
    name: Optional[str] = None  # For custom sections
    payload: memoryview = field(default_factory=lambda: memoryview(b""), repr=False, compare=False)

    @property
    def is_custom(self) -> bool:
        return self.id == WasmSectionId.CUSTOM

    @property
    def is_debug(self) -> bool:
        """True for custom sections carrying DWARF data."""
        return self.is_custom and self.name is not None and self.name.startswith(DEBUG_SECTION_PREFIX)
