"""
Configuration handling for wasm-sourcemap.
"""

from dataclasses import dataclass, fields as dataclass_fields
from typing import Optional
import json
from pathlib import Path

from .output.source_map import OutputFormat
from .resolver.structures import LineOrder
from .utils.string_utils import to_camel_case, to_snake_case


@dataclass
class Config:
    """Configuration options for wasm-sourcemap."""

    # Output options
    output_format: str = OutputFormat.GROUPED.value
    line_order: str = LineOrder.ADDRESS.value
    indent: Optional[int] = None

    # Runtime options
    verbose: bool = False

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'Config':
        """Load configuration from a JSON file."""
        if path is None:
            path = Path(__file__).parent / 'config.json'

        if not path.exists():
            return cls()

        with open(path, 'r') as f:
            data = json.load(f)

        # Convert camelCase to snake_case
        converted = {to_snake_case(key): value for key, value in data.items()}

        # Filter to only include valid fields
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {k: v for k, v in converted.items() if k in valid_fields}

        config = cls(**filtered)
        config.validate()
        return config

    def save(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        # Convert snake_case to camelCase for compatibility
        data = {to_camel_case(key): value for key, value in self.__dict__.items()}

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            ValueError: If an option has an unknown value
        """
        formats = [f.value for f in OutputFormat]
        if self.output_format not in formats:
            raise ValueError(f"Unknown output format {self.output_format!r}, expected one of {formats}")

        orders = [o.value for o in LineOrder]
        if self.line_order not in orders:
            raise ValueError(f"Unknown line order {self.line_order!r}, expected one of {orders}")

        if self.indent is not None and (not isinstance(self.indent, int) or self.indent < 0):
            raise ValueError(f"Indent must be a non-negative integer, got {self.indent!r}")
