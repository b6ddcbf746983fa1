"""
Utility functions and classes.
"""

from .path import SourcePath, normalize_path
from .string_utils import to_camel_case, to_snake_case

__all__ = ['SourcePath', 'normalize_path', 'to_camel_case', 'to_snake_case']
