import json

import pytest
from typer.testing import CliRunner

from maptransform.cli import app

runner = CliRunner()


def _floats(output):
    return [float(part) for part in output.strip().splitlines()[-1].split(",")]


def test_cover_lists_tiles():
    result = runner.invoke(app, ["--zoom", "1", "--width", "1024", "--height", "1024", "cover"])

    assert result.exit_code == 0, result.output
    assert "4 tiles" in result.output
    for tile in ("1/0/0", "1/1/0", "1/0/1", "1/1/1"):
        assert tile in result.output


def test_cover_respects_max_zoom_option():
    result = runner.invoke(app, ["--zoom", "5", "cover", "--max-zoom", "3"])

    assert result.exit_code == 0, result.output
    assert "3/3/3" in result.output
    assert "4 tiles" in result.output


def test_locate_center():
    result = runner.invoke(app, ["--lng", "10", "--lat", "20", "--zoom", "3", "locate", "256", "256"])

    assert result.exit_code == 0, result.output
    lng, lat = _floats(result.output)
    assert lng == pytest.approx(10, abs=1e-5)
    assert lat == pytest.approx(20, abs=1e-5)


def test_project_center():
    result = runner.invoke(app, ["project", "0", "0"])

    assert result.exit_code == 0, result.output
    assert _floats(result.output) == pytest.approx([256, 256])


def test_config_file(tmp_path):
    config = tmp_path / "view.json"
    config.write_text(
        json.dumps({"state": {"zoom": 1, "width": 1024, "height": 1024}, "covering": {"maxzoom": 0}}),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["--config", str(config), "cover"])

    assert result.exit_code == 0, result.output
    assert "0/0/0" in result.output
    assert "1 tiles" in result.output


def test_invalid_camera_exits_with_error():
    result = runner.invoke(app, ["--pitch", "85", "cover"])

    assert result.exit_code == 1
    assert "Error:" in result.output
