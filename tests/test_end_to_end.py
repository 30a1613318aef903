"""End-to-end tests."""

import hashlib
import json
from pathlib import Path

import pytest

from gtfs_geojson import convert
from gtfs_geojson.gtfs.models import ConvertConfig


def test_end_to_end_minimal(gtfs_minimal: Path, tmp_output: Path) -> None:
    """Test complete pipeline on minimal fixture."""
    report = convert(str(gtfs_minimal), str(tmp_output))

    assert report.stats["stop_features"] == 3
    assert report.stats["trip_features"] == 2
    assert report.stats["stops_skipped"] == 0
    assert report.stats["trips_skipped"] == 0
    assert report.output_path == str(tmp_output)

    with open(tmp_output, "rb") as f:
        assert report.output_sha256 == hashlib.sha256(f.read()).hexdigest()

    data = json.loads(tmp_output.read_text(encoding="utf-8"))
    stop_a = next(f for f in data["features"] if f["properties"].get("id") == "A")
    assert stop_a["properties"] == {
        "id": "A",
        "name": "Alpha",
        "code": "0001",
        "wheelchairBoarding": "available",
        "locationType": 0,
    }
    assert stop_a["geometry"] == {"type": "Point", "coordinates": [0.0, 48.0]}

    # Coordinates keep the precision of the feed
    stop_c = next(f for f in data["features"] if f["properties"].get("id") == "C")
    assert stop_c["geometry"]["coordinates"] == [1.98765432, 45.12345678]
    line = next(f for f in data["features"] if f["properties"].get("tripId") == "T1")
    assert [1.98765432, 45.12345678] in line["geometry"]["coordinates"]


def test_end_to_end_precision(gtfs_minimal: Path, tmp_output: Path) -> None:
    """Test opt-in coordinate rounding."""
    config = ConvertConfig(input_path=str(gtfs_minimal), output_path=str(tmp_output), precision=2)

    convert(str(gtfs_minimal), config=config)

    data = json.loads(tmp_output.read_text(encoding="utf-8"))
    stop_c = next(f for f in data["features"] if f["properties"].get("id") == "C")
    assert stop_c["geometry"]["coordinates"] == [1.99, 45.12]


def test_end_to_end_output_path_conflict(gtfs_minimal: Path, tmp_path: Path) -> None:
    """Test an output path that disagrees with the config is rejected."""
    config = ConvertConfig(input_path=str(gtfs_minimal), output_path=str(tmp_path / "a.geojson"))

    with pytest.raises(ValueError, match="conflicts"):
        convert(str(gtfs_minimal), str(tmp_path / "b.geojson"), config)

    assert not (tmp_path / "a.geojson").exists()
    assert not (tmp_path / "b.geojson").exists()


def test_end_to_end_output_path_matches_config(gtfs_minimal: Path, tmp_output: Path) -> None:
    """Test an output path equal to the config's is accepted."""
    config = ConvertConfig(input_path=str(gtfs_minimal), output_path=str(tmp_output))

    report = convert(str(gtfs_minimal), str(tmp_output), config)

    assert report.output_path == str(tmp_output)


def test_end_to_end_zip(gtfs_minimal_zip: Path, tmp_output: Path) -> None:
    """Test pipeline reading a zip archive."""
    report = convert(str(gtfs_minimal_zip), str(tmp_output))

    assert report.stats["stop_features"] == 3
    assert report.stats["trip_features"] == 2


def test_end_to_end_edgecases(gtfs_edgecases: Path, tmp_output: Path) -> None:
    """Test record-level defects shrink the output without failing."""
    report = convert(str(gtfs_edgecases), str(tmp_output))

    assert report.stats["stops"] == 6
    assert report.stats["stop_features"] == 2
    assert report.stats["stops_skipped"] == 4
    assert report.stats["trips"] == 7
    assert report.stats["trip_features"] == 3
    assert report.stats["trips_skipped"] == 4
    assert report.stats["invalid_shape_points"] == 2
    assert report.stats["trips_without_route"] == 1


def test_end_to_end_config(gtfs_edgecases: Path, tmp_output: Path) -> None:
    """Test configuration flags select what is projected."""
    config = ConvertConfig(
        input_path=str(gtfs_edgecases),
        output_path=str(tmp_output),
        include_stops=False,
        fallback_to_stops=True,
        indent=2,
    )

    report = convert(str(gtfs_edgecases), config=config)

    assert report.output_path == str(tmp_output)
    assert report.stats["stop_features"] == 0
    assert report.stats["trip_features"] == 4

    text = tmp_output.read_text(encoding="utf-8")
    assert "\n  " in text
    types = {f["geometry"]["type"] for f in json.loads(text)["features"]}
    assert types == {"LineString"}


def test_end_to_end_stdout(gtfs_minimal: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test pipeline writing to stdout."""
    report = convert(str(gtfs_minimal))

    assert report.output_path is None
    assert report.output_sha256 is None
    data = json.loads(capsys.readouterr().out)
    assert len(data["features"]) == 5


def test_end_to_end_missing_input(tmp_output: Path) -> None:
    """Test an unreadable feed is a fatal error."""
    with pytest.raises(ValueError):
        convert("/nonexistent/path", str(tmp_output))
