import json
from pathlib import Path

import pytest

from wasm_sourcemap_py.config import Config


def test_defaults() -> None:
    config = Config()
    assert config.output_format == "grouped"
    assert config.line_order == "address"
    assert config.indent is None
    assert config.verbose is False


def test_load_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert Config.load(tmp_path / "nope.json") == Config()


def test_load_camel_case_and_ignore_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "outputFormat": "compact",
        "lineOrder": "position",
        "indent": 2,
        "somethingElse": True,
    }), "utf-8")

    config = Config.load(path)

    assert config == Config(output_format="compact", line_order="position", indent=2)


def test_save_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    Config(output_format="units", verbose=True).save(path)

    saved = json.loads(path.read_text())
    assert saved["outputFormat"] == "units"
    assert saved["lineOrder"] == "address"
    assert Config.load(path) == Config(output_format="units", verbose=True)


def test_validate_rejects_unknown_values(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        Config(output_format="yaml").validate()
    with pytest.raises(ValueError):
        Config(line_order="random").validate()
    with pytest.raises(ValueError):
        Config(indent=-1).validate()

    path = tmp_path / "config.json"
    path.write_text(json.dumps({"outputFormat": "yaml"}), "utf-8")
    with pytest.raises(ValueError):
        Config.load(path)
