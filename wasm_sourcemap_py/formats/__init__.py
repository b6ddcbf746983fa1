"""
Executable format parsers.

Supports:
- WebAssembly binary modules (section framing only)
"""

from .wasm import WebAssembly, iter_sections
from .wasm_structures import *

__all__ = ['WebAssembly', 'iter_sections', 'WasmSection', 'WasmSectionId']
