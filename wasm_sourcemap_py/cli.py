#!/usr/bin/env python3
"""
wasm-sourcemap

Command-line interface for extracting DWARF line information from a
WebAssembly module as a source map.

Usage:
    wasm-sourcemap [input] [-o output] [--format FORMAT] [--line-order ORDER]
    wasm-sourcemap -h | --help
    wasm-sourcemap --version

Arguments:
    input              Path to the .wasm module, '-' for standard input (default)

Options:
    -o --output PATH   Write the document to PATH instead of standard output
    --format FORMAT    grouped (default), compact or units
    --line-order ORDER Per-file ordering: address (default) or position
    --indent N         Pretty-print the JSON document
    --config PATH      Path to config.json
    -v --verbose       Report progress on standard error
    -h --help          Show this help message
    --version          Show version

The document is {"files": [...]} on success and {"error": "..."} on failure.
"""

import sys
import argparse
from pathlib import Path
from typing import Optional, TextIO, Union

from . import __version__
from .config import Config
from .dwarf.loader import DwarfInfo
from .errors import SourceMapError
from .formats.wasm import WebAssembly
from .output.source_map import Document, ErrorDocument, OutputFormat, assemble
from .resolver.line_table import LineTableBuilder
from .resolver.structures import LineOrder

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_OUTPUT_FAILURE = 2


def status(config: Config, message: str) -> None:
    """Print a progress message on stderr when running verbose."""
    if config.verbose:
        print(message, file=sys.stderr)


def load_module(data: Union[bytes, bytearray, memoryview], config: Config) -> WebAssembly:
    """
    Scan a WebAssembly module.

    Args:
        data: Whole module contents
        config: Configuration

    Returns:
        The scanned module

    Raises:
        SourceMapError: If the module cannot be framed
    """
    status(config, "Scanning sections...")
    module = WebAssembly(data)
    status(config, f"Found {len(module.sections)} sections, {len(module.debug_sections)} debug sections")
    if module.has_code_section:
        status(config, f"Code section at 0x{module.code_section_offset:x}")
    return module


def extract(data: Union[bytes, bytearray, memoryview], config: Optional[Config] = None) -> Document:
    """
    Extract the source map of a WebAssembly module.

    Args:
        data: Whole module contents
        config: Configuration, defaults when omitted

    Returns:
        The source map document in the configured format

    Raises:
        SourceMapError: On the first fatal condition
    """
    if config is None:
        config = Config()

    module = load_module(data, config)
    code_section_offset = module.code_section_offset

    status(config, "Resolving line tables...")
    dwarf = DwarfInfo(module.debug_sections)
    builder = LineTableBuilder(code_section_offset)
    for unit in dwarf.iter_units():
        builder.add_unit(unit)
    tables = builder.finish(config.line_order)
    status(
        config,
        f"Resolved {len(tables.locations)} locations in {len(tables.files)} files "
        f"from {builder.unit_count} units ({builder.skipped_unit_count} without line program, "
        f"{builder.ignored_row_count} placeholder rows ignored)"
    )

    return assemble(tables, config.output_format)


def read_input(path: str) -> bytes:
    """Read the whole module from a path or standard input."""
    if path == '-':
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def write_document(document: Document, output: TextIO, config: Config) -> None:
    output.write(document.to_json(config.indent))
    output.write('\n')
    output.flush()


def run(input_path: str, output: TextIO, config: Config) -> int:
    """
    Extract a source map and write it, or write the error document.

    Returns:
        Process exit code
    """
    try:
        document = extract(read_input(input_path), config)
    except (SourceMapError, OSError) as e:
        status(config, f"ERROR: {e}")
        try:
            write_document(ErrorDocument(error=str(e)), output, config)
        except OSError as write_error:
            print(f"Error: {write_error}", file=sys.stderr)
            return EXIT_OUTPUT_FAILURE
        return EXIT_FAILURE

    try:
        write_document(document, output, config)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_OUTPUT_FAILURE

    status(config, "Done!")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wasm-sourcemap',
        description="Extract a DWARF source map from a WebAssembly module",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', nargs='?', default='-', help="WebAssembly module, '-' for stdin")
    parser.add_argument('-o', '--output', type=str, help='Output file (default: stdout)')
    parser.add_argument('--format', dest='output_format', choices=[f.value for f in OutputFormat],
                        help='Document shape')
    parser.add_argument('--line-order', choices=[o.value for o in LineOrder],
                        help='Ordering of each file\'s lines')
    parser.add_argument('--indent', type=int, help='Pretty-print with this indent')
    parser.add_argument('--config', type=str, help='Path to config.json')
    parser.add_argument('-v', '--verbose', action='store_true', help='Report progress on stderr')
    parser.add_argument('--version', action='version', version=f'wasm-sourcemap {__version__}')
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load config
    config_path = Path(args.config) if args.config else None
    try:
        config = Config.load(config_path)
    except (OSError, ValueError) as e:
        parser.error(f"invalid config: {e}")

    # Command line overrides
    if args.output_format is not None:
        config.output_format = args.output_format
    if args.line_order is not None:
        config.line_order = args.line_order
    if args.indent is not None:
        config.indent = args.indent
    if args.verbose:
        config.verbose = True

    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    if args.output is None:
        return run(args.input, sys.stdout, config)

    try:
        output = open(args.output, 'w', encoding='utf-8')
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_OUTPUT_FAILURE
    with output:
        return run(args.input, output, config)


if __name__ == "__main__":
    sys.exit(main())
