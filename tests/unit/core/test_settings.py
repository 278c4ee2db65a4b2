"""Tests for runtime settings."""

from permgate.core.config import Settings, get_settings
from permgate.core.rbac import Rbac


class TestSettings:
    """Tests for Settings loading."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for var in ["PERMGATE_LOG_LEVEL", "PERMGATE_LOG_DECISIONS", "PERMGATE_DUMP_INDENT"]:
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.log_level == "WARNING"
        assert settings.log_dir is None
        assert settings.log_to_file is False
        assert settings.log_to_console is True
        assert settings.log_decisions is False
        assert settings.dump_indent is None

    def test_environment_overrides(self, monkeypatch):
        """Test PERMGATE_ environment variables are read."""
        monkeypatch.setenv("PERMGATE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PERMGATE_LOG_DECISIONS", "true")
        monkeypatch.setenv("PERMGATE_DUMP_INDENT", "2")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.log_decisions is True
        assert settings.dump_indent == 2

    def test_env_file(self, tmp_path):
        """Test values from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("PERMGATE_LOG_DIR=/tmp/permgate\nUNRELATED=1\n")

        settings = Settings(_env_file=str(env_file))

        assert settings.log_dir == "/tmp/permgate"

    def test_get_settings_is_cached(self):
        """Test get_settings returns a shared instance."""
        assert get_settings() is get_settings()

    def test_store_defaults_to_cached_settings(self):
        """Test Rbac falls back to get_settings."""
        assert Rbac().settings is get_settings()
