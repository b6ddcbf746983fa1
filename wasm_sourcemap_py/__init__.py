"""
wasm-sourcemap
A tool for extracting DWARF line information from WebAssembly modules
as source maps for debuggers.
"""

__version__ = "0.1.0"
__author__ = "wasm-sourcemap developers"

from .config import Config
from .errors import SourceMapError
from .formats.wasm import WebAssembly
from .dwarf.loader import DwarfInfo
from .resolver.line_table import resolve

__all__ = ['Config', 'SourceMapError', 'WebAssembly', 'DwarfInfo', 'resolve', '__version__']
