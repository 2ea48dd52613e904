"""Tests for the command-line interface."""

import json

import pytest

from botornot.cli import build_parser, main


@pytest.fixture
def render(tmp_path, sd_png):
    path = tmp_path / "render.png"
    path.write_bytes(sd_png)
    return path


@pytest.fixture
def plain(tmp_path, bare_jpeg):
    path = tmp_path / "plain.jpg"
    path.write_bytes(bare_jpeg)
    return path


def test_default_report(render, capsys):
    """Test the default report shows the verdict sections."""
    assert main([str(render)]) == 0

    out = capsys.readouterr().out
    assert "## VERDICT" in out
    assert "AI:           Yes" in out
    assert "Tool:         stable-diffusion" in out
    assert "## DETAILS" in out


def test_quiet(render, plain, capsys):
    """Test one line per input."""
    assert main(["-q", str(render), str(plain)]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert lines[0].startswith(f"{render} | PNG | AI: yes (stable-diffusion)")
    assert lines[1] == f"{plain} | JPEG | AI: no | score 0 | confidence none"


def test_json(render, capsys):
    """Test JSON output is a list of results."""
    assert main(["--json", str(render)]) == 0

    data = json.loads(capsys.readouterr().out)
    assert len(data) == 1
    assert data[0]["is_ai"] is True
    assert data[0]["detected_tool"] == "stable-diffusion"
    assert data[0]["confidence"] == "high"


def test_output_file(render, tmp_path, capsys):
    """Test results are saved as JSON."""
    output = tmp_path / "report.json"
    assert main(["-q", "-o", str(output), str(render)]) == 0

    data = json.loads(output.read_text())
    assert data[0]["name"] == str(render)
    assert "Report saved to" in capsys.readouterr().out


def test_headers_only(render, capsys):
    """Test the header-only mode lists fields and matches."""
    assert main(["--headers-only", str(render)]) == 0

    out = capsys.readouterr().out
    assert "## FIELDS" in out
    assert "PNG tEXt keyword=parameters: Steps: 20" in out
    assert "## SIGNATURES" in out
    assert "## VERDICT" not in out


def test_headers_only_output_file(render, tmp_path):
    """Test header scans can be saved as JSON."""
    output = tmp_path / "headers.json"
    assert main(["--headers-only", "-o", str(output), str(render)]) == 0

    data = json.loads(output.read_text())
    assert data[0]["container_type"] == "PNG"
    assert data[0]["signatures"][0]["tool"] == "stable-diffusion"


def test_missing_file_exit_code(tmp_path, render, capsys):
    """Test unreadable inputs are reported and set exit code 1."""
    assert main(["-q", str(render), str(tmp_path / "missing.png")]) == 1

    captured = capsys.readouterr()
    assert "file not found" in captured.err
    assert "ERROR" in captured.out


def test_headers_only_missing_file(tmp_path, capsys):
    """Test the header-only mode also reports failures."""
    assert main(["--headers-only", str(tmp_path / "missing.png")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_no_pixels(render, capsys):
    """Test --no-pixels leaves the pixel section out."""
    assert main(["--no-pixels", str(render)]) == 0
    assert "## PIXELS" not in capsys.readouterr().out


def test_modes_are_exclusive():
    """Test -q, --json and --headers-only cannot be combined."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-q", "--json", "a.png"])


def test_version(capsys):
    """Test -V prints the version."""
    with pytest.raises(SystemExit):
        main(["-V"])
    assert "botornot" in capsys.readouterr().out
