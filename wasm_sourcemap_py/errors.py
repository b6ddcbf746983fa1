"""
Error types raised while extracting source maps.

Every failure aborts the whole run; the CLI and the HTTP server turn the
first one into an error document.
"""


class SourceMapError(Exception):
    """Base class for all extraction failures."""
    pass


class InvalidMagicError(SourceMapError):
    """Raised when the module does not start with the WebAssembly magic."""

    def __init__(self) -> None:
        super().__init__("WebAssembly magic mismatch.")


class UnsupportedVersionError(SourceMapError):
    """Raised when the module header carries a version other than 1."""

    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported WebAssembly version {version}.")
        self.version = version


class MissingCodeSectionError(SourceMapError):
    """Raised when the module has no code section."""

    def __init__(self) -> None:
        super().__init__("Missing code section.")


class MalformedEncodingError(SourceMapError):
    """Raised on bad LEB128 values, truncated sections or bad names."""
    pass


class DebugInfoDecodeError(SourceMapError):
    """Raised when the DWARF data cannot be decoded."""
    pass


class InternalInconsistencyError(SourceMapError):
    """Raised when resolver bookkeeping is violated. Indicates a bug."""
    pass
