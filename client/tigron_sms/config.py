"""
Configuration for the Tigron SMS client

Credentials and default numbers are read from a JSON file, with the
credentials optionally overridden from the environment.
"""

import os
import json
from typing import NamedTuple, Optional

from .exceptions import ConfigError

TIGRON_URL = "https://api.tigron.net/soap"
TIGRON_NS = "https://www.tigron.net/ns/"
DEFAULT_TIMEOUT = 30


class Credentials(NamedTuple):
    username: str
    password: str

    def __repr__(self):
        return f"Credentials(username={self.username!r}, password='***')"


def get_default_config_dir() -> str:
    """Get the default configuration directory following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, "tigron_sms")

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", "tigron_sms")

    return os.path.join(os.getcwd(), ".config", "tigron_sms")


class TigronConfig:
    """Configuration for the Tigron SMS client"""

    def __init__(self, config_path: Optional[str] = None):
        if config_path is None:
            config_path = os.environ.get("TIGRON_SMS_CONFIG")
            if config_path is None:
                config_path = os.path.join(get_default_config_dir(), "config.json")

        self.config_path = config_path
        self.username: str = ""
        self.password: str = ""
        self.from_number: Optional[str] = None
        self.to_number: Optional[str] = None
        self.url: str = TIGRON_URL
        self.ns: str = TIGRON_NS
        self.timeout: float = DEFAULT_TIMEOUT

        self._load_config()

    def _load_config(self):
        """Load configuration from file"""
        if not os.path.exists(self.config_path):
            raise ConfigError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file is not valid JSON: {self.config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file must hold a JSON object: {self.config_path}")

        # Environment wins over the file for credentials
        for field in ['username', 'password']:
            value = os.environ.get(f"TIGRON_{field.upper()}", config_data.get(field))
            if value is None:
                raise ConfigError(f"Missing required config field: {field}")
            setattr(self, field, value)

        self.from_number = config_data.get('from_number')
        self.to_number = config_data.get('to_number')
        self.url = config_data.get('url', TIGRON_URL).rstrip('/')
        self.ns = config_data.get('ns', TIGRON_NS)

        try:
            self.timeout = float(config_data.get('timeout', DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout in config: {config_data.get('timeout')!r}") from e

    @property
    def credentials(self) -> Credentials:
        return Credentials(self.username, self.password)
