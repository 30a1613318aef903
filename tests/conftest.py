"""Pytest configuration and fixtures."""

import zipfile
from pathlib import Path

import pytest


@pytest.fixture
def gtfs_minimal() -> Path:
    """Path to minimal GTFS fixture."""
    return Path(__file__).parent / "fixtures" / "gtfs_minimal"


@pytest.fixture
def gtfs_edgecases() -> Path:
    """Path to edge cases GTFS fixture."""
    return Path(__file__).parent / "fixtures" / "gtfs_edgecases"


@pytest.fixture
def gtfs_minimal_zip(gtfs_minimal: Path, tmp_path: Path) -> Path:
    """Minimal fixture zipped inside an enclosing folder."""
    archive_path = tmp_path / "gtfs_minimal.zip"
    with zipfile.ZipFile(archive_path, "w") as archive:
        for file_path in sorted(gtfs_minimal.glob("*.txt")):
            archive.write(file_path, f"feed/{file_path.name}")
    return archive_path


@pytest.fixture
def tmp_output(tmp_path: Path) -> Path:
    """Temporary output file path."""
    return tmp_path / "out" / "network.geojson"
