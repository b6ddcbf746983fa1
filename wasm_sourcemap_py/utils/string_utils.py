"""
Key conversion between config.json (camelCase) and Config fields (snake_case).
"""

import re

_UPPER = re.compile(r'(?<!^)(?=[A-Z])')


def to_camel_case(name: str) -> str:
    """Convert a snake_case field name such as 'line_order' to 'lineOrder'."""
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def to_snake_case(name: str) -> str:
    """Convert a camelCase key such as 'outputFormat' to 'output_format'."""
    return _UPPER.sub('_', name).lower()
