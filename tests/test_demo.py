"""
Tests for the demonstration driver and configuration helpers.
"""

import logging
from unittest.mock import patch

import pytest

from image_store.core.config import PROD_DB_PATH, TEST_DB_PATH, debug_enabled, ensure_db_directory, get_target
from image_store.core.db import health_check
from image_store.core.errors import UniqueViolation
from image_store.core.schema import KeyPointData
from scripts.demo import main, run_demo
from util.logging import logger


@pytest.fixture
def targets(tmp_path):
    return {
        "prod": str(tmp_path / "prod" / "image_features.db"),
        "test": str(tmp_path / "test" / "image_features_test.db"),
    }


def test_get_target():
    """Test named target resolution."""
    assert get_target("prod") == PROD_DB_PATH
    assert get_target("test") == TEST_DB_PATH
    with pytest.raises(ValueError):
        get_target("staging")


def test_ensure_db_directory(tmp_path):
    """Test that the parent directory of a database path is created."""
    db_path = tmp_path / "a" / "b" / "store.db"
    ensure_db_directory(str(db_path))
    assert db_path.parent.is_dir()


def test_run_demo(targets):
    """Test that the demo initializes both targets and reads the feature back."""
    feature = run_demo(targets["prod"], targets["test"])

    assert health_check(targets["prod"]) is True
    assert health_check(targets["test"]) is True
    assert feature is not None
    assert feature.id == "1"
    assert feature.camera_id == "camera_1"
    assert feature.keypoints[1] == KeyPointData(x=1.0, y=1.0, size=2.0, angle=45.0)
    assert feature.descriptors == bytes(range(10))


def test_run_demo_twice_fails(targets):
    """Test that re-running against the same production file hits the unique key."""
    run_demo(targets["prod"], targets["test"])
    with pytest.raises(UniqueViolation):
        run_demo(targets["prod"], targets["test"])


def test_main_reports_feature(targets, capsys):
    """Test the command-line entry point output and exit codes."""
    with patch('scripts.demo.get_target', side_effect=lambda name: targets[name]), \
         patch('sys.argv', ['demo.py']):
        assert main() == 0
        out = capsys.readouterr().out
        assert "Retrieved image feature:" in out
        assert "camera_1" in out

        # Second run is fatal
        assert main() == 1
        assert "ERROR:" in capsys.readouterr().out


@pytest.fixture
def restore_log_level():
    original = logger.logger.level
    logger.set_level(logging.INFO)
    yield
    logger.set_level(original)


def test_debug_env_enables_debug_logging(targets, monkeypatch, restore_log_level):
    """Test that DEBUG=true raises the store logger to DEBUG without --verbose."""
    monkeypatch.setenv("DEBUG", "true")
    with patch('scripts.demo.get_target', side_effect=lambda name: targets[name]), \
         patch('sys.argv', ['demo.py']):
        assert main() == 0
    assert logger.logger.level == logging.DEBUG


def test_default_log_level_is_info(targets, monkeypatch, restore_log_level):
    """Test that without DEBUG or --verbose the logger stays at INFO."""
    monkeypatch.setenv("DEBUG", "false")
    with patch('scripts.demo.get_target', side_effect=lambda name: targets[name]), \
         patch('sys.argv', ['demo.py']):
        assert main() == 0
    assert logger.logger.level == logging.INFO


def test_debug_enabled(monkeypatch):
    """Test the DEBUG environment flag."""
    monkeypatch.setenv("DEBUG", "TRUE")
    assert debug_enabled() is True
    monkeypatch.delenv("DEBUG")
    assert debug_enabled() is False
