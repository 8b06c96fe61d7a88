"""Tests for thumbnailer.cli."""
from __future__ import annotations

import subprocess
import sys
from unittest.mock import patch

import pytest
from loguru import logger

from thumbnailer import __version__
from thumbnailer.cli import build_parser, main


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def cli_env(tmp_path, make_movie):
    make_movie(42)
    return [
        "--config",
        str(tmp_path / "none.yaml"),
        "--movie-root",
        str(make_movie.root),
        "--output-path",
        str(tmp_path / "thumbs"),
        "--offset",
        "2",
    ]


class TestStartupValidation:
    def test_nothing_specified(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
        assert "Must specify a csv file, or a film id and timecode." in capsys.readouterr().err

    def test_film_id_without_timecode(self, capsys):
        with pytest.raises(SystemExit):
            main(["--film-id", "42"])
        assert "Must specify a timecode to extract." in capsys.readouterr().err

    def test_missing_csv(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main([str(tmp_path / "missing.csv")])
        assert "does not exist" in capsys.readouterr().err

    def test_csv_without_film_id_column(self, write_table, capsys):
        path = write_table([], header=["Title"])
        with pytest.raises(SystemExit):
            main([str(path)])
        assert "Film ID" in capsys.readouterr().err

    def test_invalid_config_value(self, capsys):
        with pytest.raises(SystemExit):
            main(["--film-id", "42", "--timecode", "0:01:00", "--n-frames", "0"])
        assert "Invalid configuration" in capsys.readouterr().err

    def test_negative_offset(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--film-id", "42", "--timecode", "0:01:00", "--offset", "-2"])
        assert exc.value.code == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_malformed_yaml_config(self, tmp_path, capsys):
        cfg = tmp_path / "broken.yaml"
        cfg.write_text("paths: [unclosed\n")
        with pytest.raises(SystemExit) as exc:
            main(["--config", str(cfg), "--film-id", "42", "--timecode", "0:01:00"])
        assert exc.value.code == 2
        assert "Invalid configuration file" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestRun:
    def test_dry_run_table(self, cli_env, write_table, tmp_path, capsys):
        table = write_table([{"Film ID": "42", "Title card timecode": "0:01:00"}])
        with patch("thumbnailer.io.subprocess.run") as mock_run:
            assert main([str(table), "--dry-run", *cli_env]) == 0
        mock_run.assert_not_called()
        assert not (tmp_path / "thumbs").exists()
        out = capsys.readouterr().out
        assert str(tmp_path / "thumbs" / "42" / "42_titlecard_0_00_58_0.jpg") in out

    def test_csv_file_flag(self, cli_env, write_table, capsys):
        table = write_table([{"Film ID": "42", "Image 1 timecode": "0:01:00"}])
        with patch("thumbnailer.io.subprocess.run"):
            assert main(["--csv-file", str(table), "--dry-run", *cli_env]) == 0
        assert "42_0_00_58_0.jpg" in capsys.readouterr().out

    def test_single_shot_titlecard(self, cli_env, tmp_path):
        with patch("thumbnailer.io.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
            main(["--film-id", "42", "--timecode", "0:01:00", "--titlecard", *cli_env])
        cmd = mock_run.call_args.args[0]
        assert cmd[-1] == str(tmp_path / "thumbs" / "42" / "42_titlecard_0_00_58_0.jpg")
        assert (tmp_path / "thumbs" / "42").is_dir()

    def test_row_errors_keep_exit_status(self, cli_env, write_table, capsys):
        table = write_table([{"Film ID": "oops", "Image 1 timecode": "0:01:00"}])
        assert main([str(table), "--dry-run", *cli_env]) == 0
        assert "id oops is not valid" in capsys.readouterr().out

    def test_yaml_config_used(self, tmp_path, make_movie, capsys):
        make_movie(1234, shard="1")
        cfg = tmp_path / "thumbnailer.yaml"
        cfg.write_text(
            "paths:\n"
            f"  movie_root: {make_movie.root}\n"
            f"  output_dir: {tmp_path / 'out'}\n"
            "locator:\n"
            "  shard_scheme: leading_digits\n"
            "extract:\n"
            "  dry_run: true\n"
        )
        assert main(["--config", str(cfg), "--film-id", "1234", "--timecode", "0:00:30"]) == 0
        assert "1234_0_00_30_0.jpg" in capsys.readouterr().out


class TestParser:
    def test_defaults_do_not_override_config(self):
        args = build_parser().parse_args(["file.csv"])
        assert args.csv == "file.csv"
        assert args.offset is None
        assert args.n_frames is None
        assert args.image_as_default is None
        assert args.dry_run is False

    def test_no_image_as_default(self):
        args = build_parser().parse_args(["file.csv", "--no-image-as-default"])
        assert args.image_as_default is False
