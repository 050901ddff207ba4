"""
Tests for the Pi-hole API client - ConfigLoader

This module tests the configuration loader including:
- Loading from environment variables
- Loading from the config file with the password taken from the keyring
- Priority resolution
- Profile management operations
- Security controls (file permissions, no secrets on disk)
"""

import json
import os
from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from pihole_api.core.config_loader import ConfigLoader
from pihole_api.core.exceptions import ConfigurationError
from pihole_api.core.models import PiholeConfig

ENV_VARS = (
    "PIHOLE_URL",
    "PIHOLE_PASSWORD",
    "PIHOLE_SID",
    "PIHOLE_CSRF",
    "PIHOLE_VERIFY_SSL",
    "PIHOLE_TIMEOUT",
    "PIHOLE_MAX_RETRIES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own Pi-hole settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_config_dir(tmp_path, monkeypatch):
    """Point the loader at a temporary config directory."""
    config_dir = tmp_path / ".pihole-api"
    config_dir.mkdir()
    monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_DIR", config_dir)
    monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_FILE", config_dir / "config.json")
    return config_dir


@pytest.fixture
def mock_keyring():
    """Replace the OS keyring with an in-memory store."""
    store = {}

    with patch("pihole_api.core.config_loader.keyring") as mock_kr:
        mock_kr.get_password.side_effect = lambda service, profile: store.get((service, profile))
        mock_kr.set_password.side_effect = (
            lambda service, profile, password: store.__setitem__((service, profile), password)
        )

        def delete(service, profile):
            if (service, profile) not in store:
                raise PasswordDeleteError("not found")
            del store[(service, profile)]

        mock_kr.delete_password.side_effect = delete
        mock_kr.store = store
        yield mock_kr


@pytest.fixture
def mock_config_file(temp_config_dir, mock_keyring):
    """Create a config file with test profiles and their keyring passwords."""
    config_file = temp_config_dir / "config.json"
    config_data = {
        "default": {"url": "http://pi.hole", "verify_ssl": True},
        "upstairs": {"url": "https://192.168.1.2", "verify_ssl": False, "timeout": 5.0},
    }
    with open(config_file, "w") as f:
        json.dump(config_data, f)
    os.chmod(config_file, 0o600)

    mock_keyring.store[("pihole-api", "default")] = "default-password"
    mock_keyring.store[("pihole-api", "upstairs")] = "upstairs-password"
    return config_file


class TestConfigLoaderEnvironmentVariables:
    """Test loading from environment variables (Priority 1)."""

    def test_load_from_env_success(self, monkeypatch):
        monkeypatch.setenv("PIHOLE_URL", "http://pi.hole/")
        monkeypatch.setenv("PIHOLE_PASSWORD", "env-password")
        monkeypatch.setenv("PIHOLE_VERIFY_SSL", "false")
        monkeypatch.setenv("PIHOLE_TIMEOUT", "3.5")
        monkeypatch.setenv("PIHOLE_MAX_RETRIES", "1")

        config = ConfigLoader._load_from_env()

        assert config.url == "http://pi.hole"
        assert config.password == "env-password"
        assert config.verify_ssl is False
        assert config.timeout == 3.5
        assert config.max_retries == 1

    def test_load_from_env_preset_session(self, monkeypatch):
        monkeypatch.setenv("PIHOLE_URL", "http://pi.hole")
        monkeypatch.setenv("PIHOLE_SID", "sid")
        monkeypatch.setenv("PIHOLE_CSRF", "csrf")

        config = ConfigLoader._load_from_env()

        assert config.password is None
        assert config.sid == "sid"
        assert config.csrf == "csrf"

    def test_load_from_env_verify_ssl_default(self, monkeypatch):
        monkeypatch.setenv("PIHOLE_URL", "http://pi.hole")

        config = ConfigLoader._load_from_env()

        assert config.verify_ssl is True

    def test_load_from_env_missing_url(self, monkeypatch):
        monkeypatch.setenv("PIHOLE_PASSWORD", "env-password")

        assert ConfigLoader._load_from_env() is None

    def test_load_from_env_invalid_url(self, monkeypatch):
        monkeypatch.setenv("PIHOLE_URL", "pi.hole")

        with pytest.raises(ConfigurationError):
            ConfigLoader._load_from_env()

    def test_load_from_env_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("PIHOLE_URL", "http://pi.hole")
        monkeypatch.setenv("PIHOLE_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError):
            ConfigLoader._load_from_env()


class TestConfigLoaderConfigFile:
    """Test loading from the config file (Priority 2)."""

    def test_load_default_profile(self, mock_config_file):
        config = ConfigLoader._load_from_config_file("default")

        assert config.url == "http://pi.hole"
        assert config.password == "default-password"
        assert config.verify_ssl is True

    def test_load_named_profile(self, mock_config_file):
        config = ConfigLoader._load_from_config_file("upstairs")

        assert config.url == "https://192.168.1.2"
        assert config.password == "upstairs-password"
        assert config.verify_ssl is False
        assert config.timeout == 5.0

    def test_nonexistent_profile(self, mock_config_file):
        assert ConfigLoader._load_from_config_file("nonexistent") is None

    def test_missing_file(self, temp_config_dir, mock_keyring):
        assert ConfigLoader._load_from_config_file("default") is None

    def test_invalid_json(self, temp_config_dir):
        (temp_config_dir / "config.json").write_text("{invalid json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            ConfigLoader._load_from_config_file("default")

    def test_not_an_object(self, temp_config_dir):
        (temp_config_dir / "config.json").write_text("[1, 2]")

        with pytest.raises(ConfigurationError):
            ConfigLoader._load_from_config_file("default")

    def test_missing_url(self, temp_config_dir, mock_keyring):
        (temp_config_dir / "config.json").write_text(json.dumps({"default": {"verify_ssl": True}}))

        with pytest.raises(ConfigurationError, match="Missing required field 'url'"):
            ConfigLoader._load_from_config_file("default")

    def test_password_missing_from_keyring(self, temp_config_dir, mock_keyring):
        (temp_config_dir / "config.json").write_text(json.dumps({"default": {"url": "http://pi.hole"}}))

        config = ConfigLoader._load_from_config_file("default")

        assert config.password is None

    def test_keyring_unavailable(self, mock_config_file, mock_keyring):
        mock_keyring.get_password.side_effect = KeyringError("no backend")

        config = ConfigLoader._load_from_config_file("default")

        assert config.password is None


class TestConfigLoaderPriority:
    """Test load() priority resolution."""

    def test_env_wins_over_file(self, mock_config_file, monkeypatch):
        monkeypatch.setenv("PIHOLE_URL", "http://env.pi.hole")

        config = ConfigLoader.load("default")

        assert config.url == "http://env.pi.hole"

    def test_falls_back_to_file(self, mock_config_file):
        config = ConfigLoader.load("upstairs")

        assert config.url == "https://192.168.1.2"

    def test_nothing_found(self, temp_config_dir, mock_keyring):
        with pytest.raises(ConfigurationError, match="No configuration found"):
            ConfigLoader.load("default")


class TestConfigLoaderProfileManagement:
    """Test save, delete and listing of profiles."""

    def test_save_profile_keeps_password_off_disk(self, temp_config_dir, mock_keyring):
        config = PiholeConfig(url="http://pi.hole", password="secret", verify_ssl=False)

        ConfigLoader.save_profile("home", config)

        raw = (temp_config_dir / "config.json").read_text()
        assert "secret" not in raw
        saved = json.loads(raw)["home"]
        assert saved["url"] == "http://pi.hole"
        assert saved["verify_ssl"] is False
        assert "password" not in saved
        mock_keyring.set_password.assert_called_once_with("pihole-api", "home", "secret")

    def test_save_profile_preset_session_not_persisted(self, temp_config_dir, mock_keyring):
        config = PiholeConfig(url="http://pi.hole", sid="sid", csrf="csrf")

        ConfigLoader.save_profile("home", config)

        saved = json.loads((temp_config_dir / "config.json").read_text())["home"]
        assert "sid" not in saved
        assert "csrf" not in saved
        mock_keyring.set_password.assert_not_called()

    def test_save_profile_keyring_failure(self, temp_config_dir, mock_keyring):
        mock_keyring.set_password.side_effect = KeyringError("locked")

        with pytest.raises(ConfigurationError, match="keyring"):
            ConfigLoader.save_profile("home", PiholeConfig(url="http://pi.hole", password="secret"))

    def test_save_then_load_round_trip(self, temp_config_dir, mock_keyring):
        ConfigLoader.save_profile(
            "home", PiholeConfig(url="http://pi.hole", password="secret", max_retries=5)
        )

        config = ConfigLoader.load("home")

        assert config.password == "secret"
        assert config.max_retries == 5

    def test_save_sets_secure_permissions(self, temp_config_dir, mock_keyring):
        ConfigLoader.save_profile("home", PiholeConfig(url="http://pi.hole"))

        mode = os.stat(temp_config_dir / "config.json").st_mode & 0o777
        assert mode == 0o600

    def test_delete_profile(self, mock_config_file, mock_keyring):
        ConfigLoader.delete_profile("upstairs")

        assert ConfigLoader.list_profiles() == ["default"]
        assert ("pihole-api", "upstairs") not in mock_keyring.store

    def test_delete_profile_without_password(self, temp_config_dir, mock_keyring):
        ConfigLoader.save_profile("home", PiholeConfig(url="http://pi.hole"))

        ConfigLoader.delete_profile("home")

        assert ConfigLoader.list_profiles() == []

    def test_delete_missing_profile(self, mock_config_file):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader.delete_profile("nonexistent")

    def test_list_profiles(self, mock_config_file):
        assert ConfigLoader.list_profiles() == ["default", "upstairs"]

    def test_list_profiles_empty(self, temp_config_dir):
        assert ConfigLoader.list_profiles() == []

    def test_get_profile_info(self, mock_config_file):
        info = ConfigLoader.get_profile_info("upstairs")

        assert info == {
            "url": "https://192.168.1.2",
            "verify_ssl": False,
            "has_password": True,
        }

    def test_get_profile_info_missing(self, mock_config_file):
        with pytest.raises(ConfigurationError):
            ConfigLoader.get_profile_info("nonexistent")


class TestConfigLoaderSecurity:
    """Test file permission controls."""

    def test_insecure_permissions_fixed(self, mock_config_file):
        os.chmod(mock_config_file, 0o644)

        with patch("pihole_api.core.config_loader.logger") as mock_logger:
            ConfigLoader.list_profiles()

        mock_logger.warning.assert_called_once()
        assert os.stat(mock_config_file).st_mode & 0o777 == 0o600

    def test_secure_permissions_no_warning(self, mock_config_file):
        with patch("pihole_api.core.config_loader.logger") as mock_logger:
            ConfigLoader.list_profiles()

        mock_logger.warning.assert_not_called()
