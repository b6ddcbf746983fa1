"""
Output generation module.
"""

from .source_map import (
    OutputFormat, SourceFile, SourceMap, CompactSourceMap,
    SourceUnit, UnitSourceMap, ErrorDocument, Document, assemble
)

__all__ = [
    'OutputFormat', 'SourceFile', 'SourceMap', 'CompactSourceMap',
    'SourceUnit', 'UnitSourceMap', 'ErrorDocument', 'Document', 'assemble'
]
