"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from mlframe.config.settings import (
    Environment,
    Settings,
    StorageBackend,
    get_settings,
    reload_settings,
)


@pytest.mark.unit
class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = Settings()

        assert settings.storage_backend == StorageBackend.MEMORY
        assert settings.cv_folds == 10
        assert settings.cv_shuffle is False
        assert settings.cv_random_seed == 42
        assert settings.csv_delimiter == ","
        assert settings.csv_quotechar == '"'

    def test_environment_variables(self, monkeypatch) -> None:
        """Test MLFRAME_ prefixed variables override defaults."""
        monkeypatch.setenv("MLFRAME_STORAGE_BACKEND", "redis")
        monkeypatch.setenv("MLFRAME_CV_FOLDS", "5")
        monkeypatch.setenv("MLFRAME_CV_SHUFFLE", "true")

        settings = Settings()

        assert settings.storage_backend == StorageBackend.REDIS
        assert settings.cv_folds == 5
        assert settings.cv_shuffle is True

    def test_cv_folds_minimum(self) -> None:
        """Test that fewer than two folds is rejected."""
        with pytest.raises(ValidationError, match="cv_folds"):
            Settings(cv_folds=1)

    def test_csv_delimiter_single_char(self) -> None:
        """Test that a multi-character delimiter is rejected."""
        with pytest.raises(ValidationError):
            Settings(csv_delimiter="::")

    def test_log_file_directory_created(self, tmp_path) -> None:
        """Test that the log directory is created."""
        log_file = tmp_path / "logs" / "app.log"
        settings = Settings(log_file=str(log_file))

        assert settings.log_file == log_file
        assert log_file.parent.exists()

    def test_environment_helpers(self) -> None:
        """Test is_development and is_production."""
        assert Settings(environment=Environment.DEVELOPMENT).is_development()
        assert Settings(environment="production").is_production()

    def test_singleton_and_reload(self, monkeypatch) -> None:
        """Test get_settings caches and reload_settings rebuilds."""
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("MLFRAME_CV_FOLDS", "3")
        reloaded = reload_settings()

        assert reloaded is not first
        assert get_settings().cv_folds == 3
