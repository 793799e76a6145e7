"""Integration tests for the tools/convert.py command line."""

import importlib.util
import sys
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def convert_tool():
    """Load tools/convert.py as a module."""
    path = Path(__file__).parent.parent.parent / "tools" / "convert.py"
    spec = importlib.util.spec_from_file_location("convert_tool", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run_tool(convert_tool, monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["convert.py", *args])
    convert_tool.main()


def test_import_then_export(convert_tool, monkeypatch, tmp_path, sample_tiles):
    original = sample_tiles["gradient"]["packed"] * 3 + b"\x01\x02\x03"
    bin_path = tmp_path / "tiles.bin"
    bin_path.write_bytes(original)

    run_tool(convert_tool, monkeypatch, "import", str(bin_path))
    png_path = tmp_path / "tiles.png"
    with Image.open(png_path) as img:
        assert img.size == (128, 8)
        assert img.mode == "P"

    out_path = tmp_path / "out.bin"
    run_tool(convert_tool, monkeypatch, "export", str(png_path), str(out_path))
    assert out_path.read_bytes() == original


def test_import_with_width_and_trace(convert_tool, monkeypatch, tmp_path, sample_tiles):
    bin_path = tmp_path / "tiles.bin"
    bin_path.write_bytes(sample_tiles["solid"]["packed"] * 4)
    png_path = tmp_path / "tiles.png"
    trace_path = tmp_path / "trace.json"

    run_tool(
        convert_tool, monkeypatch,
        "import", str(bin_path), str(png_path), "--width", "16", "--trace", str(trace_path),
    )

    with Image.open(png_path) as img:
        assert img.size == (16, 16)
    assert trace_path.exists()


def test_export_keep_empty_tiles(convert_tool, monkeypatch, tmp_path, sample_tiles):
    bin_path = tmp_path / "tiles.bin"
    bin_path.write_bytes(sample_tiles["solid"]["packed"])
    png_path = tmp_path / "tiles.png"
    out_path = tmp_path / "out.bin"

    run_tool(convert_tool, monkeypatch, "import", str(bin_path), str(png_path))
    run_tool(convert_tool, monkeypatch, "export", str(png_path), str(out_path), "--keep-empty-tiles")
    assert len(out_path.read_bytes()) == 16 * 16


def test_missing_input_exits(convert_tool, monkeypatch, tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_tool(convert_tool, monkeypatch, "import", str(tmp_path / "missing.bin"))
    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_too_small_input_exits(convert_tool, monkeypatch, tmp_path, capsys):
    bin_path = tmp_path / "tiny.bin"
    bin_path.write_bytes(b"\x00\x01\x02")
    with pytest.raises(SystemExit) as excinfo:
        run_tool(convert_tool, monkeypatch, "import", str(bin_path))
    assert excinfo.value.code == 1
    assert "smaller than one" in capsys.readouterr().err
