import pytest

from wasm_sourcemap_py.cli import extract
from wasm_sourcemap_py.config import Config
from wasm_sourcemap_py.dwarf.structures import DW_LANG_C11, DW_LANG_Rust
from wasm_sourcemap_py.errors import InvalidMagicError, MissingCodeSectionError

from wasm_fixtures import (
    WASM_HEADER, UnitSpec, advance_line, advance_pc, build_module, copy, custom_payload,
    debug_sections, end_sequence, module_with_debug_info, row, set_address, set_column, set_file
)


def _single_file_program() -> bytes:
    return (
        set_address(0x2) + advance_line(2) + set_column(5) + copy()      # main() body, line 3
        + advance_pc(3) + advance_line(1) + set_column(9) + copy()       # line 4
        + advance_pc(2) + copy()                                         # line 4 again
        + advance_pc(1) + advance_line(1) + set_column(0) + copy()       # line 5, left edge
        + advance_pc(2) + end_sequence()
    )


def _c_unit(program: bytes) -> UnitSpec:
    return UnitSpec("main.c", DW_LANG_C11, "/home/dev/app", ["/home/dev/app/src"], [("main.c", 1)], program)


def test_single_file_module() -> None:
    data, code_offset = module_with_debug_info([_c_unit(_single_file_program())])

    document = extract(data).to_dict()

    (source,) = document["files"]
    assert source["file"] == "/home/dev/app/src/main.c"
    assert source["language"] == DW_LANG_C11
    assert source["lines"] == [
        [code_offset + 2, 2, 4],
        [code_offset + 5, 3, 8],
        [code_offset + 8, 4, 0],
    ]
    addresses = [line[0] for line in source["lines"]]
    assert addresses == sorted(set(addresses))


def test_compact_format() -> None:
    data, code_offset = module_with_debug_info([_c_unit(_single_file_program())])

    document = extract(data, Config(output_format="compact")).to_dict()

    assert document["files"] == ["/home/dev/app/src/main.c"]
    assert document["locations"] == [
        [code_offset + 2, 0, 2, 4],
        [code_offset + 5, 0, 3, 8],
        [code_offset + 7, 0, 3, 8],
        [code_offset + 8, 0, 4, 0],
        [code_offset + 10, 0, 4, 0],
    ]


def test_units_format() -> None:
    data, code_offset = module_with_debug_info([
        _c_unit(_single_file_program()),
        UnitSpec("empty.c", DW_LANG_C11, "/home/dev/app"),
    ])

    document = extract(data, Config(output_format="units")).to_dict()

    (unit,) = document["units"]
    assert unit["name"] == "main.c"
    assert unit["directory"] == "/home/dev/app"
    assert [line[0] - code_offset for line in unit["files"][0]["lines"]] == [2, 5, 7, 8, 10]


def test_stripped_function_sequence_is_ignored() -> None:
    program = (
        set_address(0x0) + advance_line(19) + copy()
        + advance_pc(4) + advance_line(1) + copy()
        + advance_pc(2) + end_sequence()
        + row(0x6, 2, 3)
        + advance_pc(2) + end_sequence()
    )
    data, code_offset = module_with_debug_info([_c_unit(program)])

    document = extract(data, Config(output_format="compact")).to_dict()

    assert document["locations"] == [
        [code_offset + 6, 0, 1, 2],
        [code_offset + 8, 0, 1, 2],
    ]


def test_rust_columns() -> None:
    program = row(0x4, 10, 5) + advance_pc(2) + end_sequence()
    data, code_offset = module_with_debug_info([
        UnitSpec("src/lib.rs", DW_LANG_Rust, "/work", [], [("/work/src/lib.rs", 0)], program),
    ])

    (source,) = extract(data).to_dict()["files"]

    assert source["file"] == "/work/src/lib.rs"
    assert source["language"] == DW_LANG_Rust
    assert source["lines"] == [[code_offset + 4, 9, 5]]


def test_dwarf5_line_program() -> None:
    program = set_file(0) + row(0x4, 3, 2) + advance_pc(2) + end_sequence()
    data, code_offset = module_with_debug_info([
        UnitSpec("main.c", DW_LANG_C11, "/elsewhere", ["/build", "src"], [("main.c", 1)], program, line_version=5),
    ])

    (source,) = extract(data).to_dict()["files"]

    assert source["file"] == "src/main.c"
    assert source["lines"] == [[code_offset + 4, 2, 1]]


def test_position_line_order() -> None:
    program = (
        set_address(0x2) + advance_line(9) + copy()          # line 10
        + advance_pc(2) + advance_line(-8) + copy()          # line 2
        + advance_pc(2) + end_sequence()                     # line 2
    )
    data, code_offset = module_with_debug_info([_c_unit(program)])

    (source,) = extract(data, Config(line_order="position")).to_dict()["files"]

    assert source["lines"] == [[code_offset + 4, 1, 0], [code_offset + 2, 9, 0]]


def test_module_without_debug_info() -> None:
    data, _ = build_module([(1, b"\x01\x60\x00\x00"), (10, b"\x00")])
    assert extract(data).to_dict() == {"files": []}


def test_missing_code_section() -> None:
    data, _ = build_module([
        (0, custom_payload(name, payload))
        for name, payload in debug_sections([_c_unit(_single_file_program())])
    ])

    with pytest.raises(MissingCodeSectionError):
        extract(data)


def test_invalid_magic() -> None:
    with pytest.raises(InvalidMagicError):
        extract(b"\x7fELF" + WASM_HEADER[4:])
