"""
Pi-hole API Client - Configuration Loader

This module loads connection profiles with cascading priority:
environment variables -> config file + keyring.
The config file only ever holds non-secret settings; passwords live in
the OS keyring.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import PiholeConfig

logger = logging.getLogger("pihole-api")

# Settings persisted per profile; the password lives in the keyring
PROFILE_FIELDS = (
    "url",
    "verify_ssl",
    "timeout",
    "max_retries",
    "retry_delay_base",
    "retry_delay_max",
    "backoff_multiplier",
    "auto_refresh",
    "refresh_threshold",
)


class ConfigLoader:
    """
    Configuration loader for Pi-hole connection profiles.

    Priority order:
    1. Environment variables (PIHOLE_URL, PIHOLE_PASSWORD, ...)
    2. Config file (~/.pihole-api/config.json) with the password taken from the keyring
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".pihole-api"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"
    REQUIRED_FILE_PERMISSIONS = 0o600
    KEYRING_SERVICE_NAME = "pihole-api"

    @classmethod
    def load(cls, profile: str = "default") -> PiholeConfig:
        """
        Load configuration for the specified profile.

        Args:
            profile: Profile name to load (default: "default")

        Returns:
            PiholeConfig for the profile

        Raises:
            ConfigurationError: If no configuration found or configuration invalid
        """
        logger.debug(f"Loading configuration for profile: {profile}")

        config = cls._load_from_env()
        if config:
            logger.info("Loaded configuration from environment variables")
            return config

        config = cls._load_from_config_file(profile)
        if config:
            logger.info(f"Loaded configuration for profile '{profile}' from config file")
            return config

        raise ConfigurationError(
            f"No configuration found for profile '{profile}'. "
            f"Run 'pihole-api setup' or set environment variables (PIHOLE_URL, PIHOLE_PASSWORD)",
            context={"profile": profile},
        )

    @classmethod
    def _load_from_env(cls) -> Optional[PiholeConfig]:
        """Load configuration from environment variables."""
        url = os.getenv("PIHOLE_URL")
        if not url:
            return None

        values: Dict[str, Any] = {
            "url": url,
            "password": os.getenv("PIHOLE_PASSWORD"),
            "sid": os.getenv("PIHOLE_SID"),
            "csrf": os.getenv("PIHOLE_CSRF"),
            "verify_ssl": os.getenv("PIHOLE_VERIFY_SSL", "true").lower() in ("true", "1", "yes"),
        }
        if os.getenv("PIHOLE_TIMEOUT"):
            values["timeout"] = os.getenv("PIHOLE_TIMEOUT")
        if os.getenv("PIHOLE_MAX_RETRIES"):
            values["max_retries"] = os.getenv("PIHOLE_MAX_RETRIES")

        try:
            return PiholeConfig(**values)
        except ValidationError as e:
            logger.error(f"Invalid configuration in environment variables: {e.error_count()} error(s)")
            raise ConfigurationError(f"Invalid configuration in environment variables: {e}")

    @classmethod
    def _load_from_config_file(cls, profile: str) -> Optional[PiholeConfig]:
        """Load configuration from config file."""
        config_data = cls._read_config_file()
        if profile not in config_data:
            logger.debug(f"Profile '{profile}' not found in config file")
            return None

        profile_config = config_data[profile]
        if "url" not in profile_config:
            raise ConfigurationError(f"Missing required field 'url' in profile '{profile}'")

        settings = {key: profile_config[key] for key in PROFILE_FIELDS if key in profile_config}
        try:
            return PiholeConfig(password=cls.get_password(profile), **settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in profile '{profile}': {e}")

    @classmethod
    def get_password(cls, profile: str) -> Optional[str]:
        """Look up the stored password for a profile in the OS keyring."""
        try:
            return keyring.get_password(cls.KEYRING_SERVICE_NAME, profile)
        except KeyringError as e:
            logger.debug(f"Could not read password from keyring: {e}")
            return None

    @classmethod
    def save_profile(cls, profile: str, config: PiholeConfig) -> None:
        """
        Save a profile: settings to the config file, password to the keyring.

        Args:
            profile: Profile name
            config: Configuration to save

        Raises:
            ConfigurationError: If the password cannot be stored
        """
        config_data = cls._read_config_file()
        config_data[profile] = config.model_dump(include=set(PROFILE_FIELDS))
        cls._write_config_file(config_data)

        if config.password:
            try:
                keyring.set_password(cls.KEYRING_SERVICE_NAME, profile, config.password)
            except KeyringError as e:
                raise ConfigurationError(f"Could not store password in keyring: {e}")
            logger.debug("Password stored in keyring")

        logger.info(f"Saved profile '{profile}' to config file")

    @classmethod
    def delete_profile(cls, profile: str) -> None:
        """
        Delete a profile and its stored password.

        Args:
            profile: Profile name to delete

        Raises:
            ConfigurationError: If profile doesn't exist
        """
        config_data = cls._read_config_file()
        if profile not in config_data:
            raise ConfigurationError(f"Profile '{profile}' not found")

        del config_data[profile]
        cls._write_config_file(config_data)

        try:
            keyring.delete_password(cls.KEYRING_SERVICE_NAME, profile)
        except PasswordDeleteError:
            logger.debug(f"No stored password for profile '{profile}'")
        except KeyringError as e:
            logger.warning(f"Could not remove password from keyring: {e}")

        logger.info(f"Deleted profile '{profile}' from config file")

    @classmethod
    def list_profiles(cls) -> List[str]:
        """List all configured profile names."""
        return list(cls._read_config_file().keys())

    @classmethod
    def get_profile_info(cls, profile: str) -> Dict[str, Any]:
        """
        Get non-sensitive information about a profile.

        Raises:
            ConfigurationError: If profile doesn't exist
        """
        config_data = cls._read_config_file()
        if profile not in config_data:
            raise ConfigurationError(f"Profile '{profile}' not found")

        profile_config = config_data[profile]
        return {
            "url": profile_config.get("url", ""),
            "verify_ssl": profile_config.get("verify_ssl", True),
            "has_password": cls.get_password(profile) is not None,
        }

    @classmethod
    def _read_config_file(cls) -> Dict[str, Any]:
        config_file = cls.DEFAULT_CONFIG_FILE
        if not config_file.exists():
            logger.debug(f"Config file not found: {config_file}")
            return {}

        cls._verify_file_permissions(config_file)

        try:
            with open(config_file, "r") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            raise ConfigurationError(f"Invalid JSON in config file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading config file: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError("Config file must contain a JSON object of profiles")
        return config_data

    @classmethod
    def _write_config_file(cls, config_data: Dict[str, Any]) -> None:
        config_file = cls.DEFAULT_CONFIG_FILE
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(config_data, f, indent=2)

        cls._set_secure_permissions(config_file)

    @classmethod
    def _set_secure_permissions(cls, file_path: Path) -> None:
        """Set secure file permissions (0600 - owner read/write only)."""
        try:
            os.chmod(file_path, cls.REQUIRED_FILE_PERMISSIONS)
            logger.debug(f"Set secure permissions on {file_path}")
        except OSError as e:
            logger.warning(f"Could not set secure permissions on {file_path}: {e}")

    @classmethod
    def _verify_file_permissions(cls, file_path: Path) -> None:
        """Warn about and fix permissive config file modes."""
        try:
            current_perms = os.stat(file_path).st_mode & 0o777
        except OSError as e:
            logger.debug(f"Could not verify file permissions: {e}")
            return

        if current_perms != cls.REQUIRED_FILE_PERMISSIONS:
            logger.warning(
                f"Config file {file_path} has insecure permissions {oct(current_perms)}. "
                f"Recommended: {oct(cls.REQUIRED_FILE_PERMISSIONS)}"
            )
            cls._set_secure_permissions(file_path)
