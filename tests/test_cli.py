"""Tests for the command line entry point."""

import pandas as pd
import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from photo_index import cli
from photo_index.database import reset_engine
from photo_index.db.models import File, Photo
from photo_index.utils.logging import parse_level


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """No env overrides, no real config.yaml, no global logging changes."""
    monkeypatch.delenv("PHOTO_INDEX_DB_URI", raising=False)
    monkeypatch.delenv("PHOTO_INDEX_ORIGINALS", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("photo_index.config.CONFIG_SEARCH_PATHS", [tmp_path / "config.yaml"])
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def originals(tmp_path, jpeg_writer):
    root = tmp_path / "originals"
    jpeg_writer(root / "2023" / "IMG_1.jpg")
    jpeg_writer(root / "2023" / "IMG_1_001.jpg", color=(0, 255, 0))
    jpeg_writer(root / "2023" / "IMG_2.jpg", color=(0, 0, 255))
    return root


class TestBuildParser:

    def test_flags(self):
        args = cli.build_parser().parse_args([
            "--originals", "/photos", "--db-uri", "sqlite://", "--no-classifier", "--no-geocoding",
        ])

        assert args.originals == "/photos"
        assert args.db_uri == "sqlite://"
        assert args.no_classifier is True
        assert args.no_geocoding is True
        assert args.report is None

    def test_overrides_applied(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "index:\n  originals_path: /from/file\n"
            "classifier:\n  enabled: true\n"
        )
        args = cli.build_parser().parse_args(["--originals", "/from/cli", "--no-classifier", "--log-level", "DEBUG"])

        config = cli.load_run_config(args)

        assert config.index.originals_path == "/from/cli"
        assert config.classifier.enabled is False
        assert config.geocoding.enabled is True
        assert config.logging.level == "DEBUG"


class TestMain:

    def test_indexes_tree(self, tmp_path, originals, capsys):
        db_path = tmp_path / "catalog.db"
        report_path = tmp_path / "report.csv"

        exit_code = cli.main([
            "--originals", str(originals),
            "--db-uri", f"sqlite:///{db_path}",
            "--no-classifier",
            "--no-geocoding",
            "--report", str(report_path),
        ])

        assert exit_code == 0
        assert "Indexed 3 files from" in capsys.readouterr().out

        engine = create_engine(f"sqlite:///{db_path}")
        with Session(engine) as session:
            assert session.scalar(select(func.count()).select_from(Photo)) == 2
            assert session.scalar(select(func.count()).select_from(File)) == 3
        engine.dispose()

        report = pd.read_csv(report_path)
        assert sorted(report["relative_path"]) == ["2023/IMG_1.jpg", "2023/IMG_1_001.jpg", "2023/IMG_2.jpg"]

    def test_missing_originals(self, tmp_path):
        exit_code = cli.main(["--db-uri", f"sqlite:///{tmp_path / 'catalog.db'}"])

        assert exit_code == 1

    def test_missing_database_uri(self, originals):
        exit_code = cli.main(["--originals", str(originals), "--no-classifier", "--no-geocoding"])

        assert exit_code == 1

    def test_missing_config_file(self, tmp_path):
        exit_code = cli.main(["--config", str(tmp_path / "nope.yaml")])

        assert exit_code == 1

    def test_unknown_log_level(self, monkeypatch, originals, tmp_path):
        monkeypatch.setattr(cli, "setup_logging", lambda level, *args, **kwargs: parse_level(level))

        exit_code = cli.main([
            "--originals", str(originals), "--db-uri", f"sqlite:///{tmp_path / 'catalog.db'}",
            "--log-level", "chatty",
        ])

        assert exit_code == 1
        assert not (tmp_path / "catalog.db").exists()
