"""Shared fixtures for the thumbnailer test suite."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, Dict, List

import pytest
from loguru import logger

from thumbnailer.config import AppConfig

HEADER = ["Film ID", "Title card timecode", "Image 1 timecode", "Image 2 timecode", "Image 3 timecode", "Done", "Published"]


@pytest.fixture
def default_config() -> AppConfig:
    """Return a default AppConfig with no file."""
    return AppConfig()


@pytest.fixture
def log_messages() -> List[str]:
    """Collect loguru messages emitted during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_movie(tmp_path: Path) -> Callable[..., Path]:
    """Create a fake master file of ``size`` bytes under ``movies/<shard>/<id>/``."""
    root = tmp_path / "movies"

    def _make(film_id: int, name: str = "master.mp4", size: int = 100, shard: str | None = None) -> Path:
        shard_dir = shard if shard is not None else str(film_id // 100)
        path = root / shard_dir / str(film_id) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\0" * size)
        return path

    _make.root = root  # type: ignore[attr-defined]
    return _make


@pytest.fixture
def write_table(tmp_path: Path) -> Callable[[List[Dict[str, str]]], Path]:
    """Write rows keyed by the human column names to a CSV file."""

    def _write(rows: List[Dict[str, str]], header: List[str] = HEADER, name: str = "films.csv") -> Path:
        path = tmp_path / name
        with path.open("w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=header)
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        return path

    return _write


@pytest.fixture
def live_config(tmp_path: Path, make_movie) -> AppConfig:
    """Config pointing at temporary movie and output trees."""
    return AppConfig.model_validate(
        {
            "paths": {"movie_root": str(make_movie.root), "output_dir": str(tmp_path / "thumbs")},
            "extract": {"offset": 2.0},
        }
    )
