"""
Minimal Configuration Reader for Quake Log Tools

A lightweight configuration system that provides:
- Profile-based configuration management
- JSON-based configuration storage with read-only access
- Hierarchical configuration with dot-notation access
- Automatic path resolution for file paths

Usage:
    # Use the default singleton instance
    from config import config
    value = config.get('paths.log_file')

    # Create a custom instance with specific profile
    from config import Config
    custom_config = Config(profile='my_server')

Profiles live in profiles/<profile>.json. A missing default profile simply
means an empty configuration; every tool has built-in defaults.
"""

from typing import Dict, Any, List, Optional
from pathlib import Path

from quake_log_tools.base import JSONTool, logger


class Config(JSONTool):
    """
    A minimal JSON-based configuration reader for Quake log tools.

    Attributes:
        config_dir (str): Directory containing profile JSON files
        profile (str): Currently active profile name
        data (dict): Loaded configuration data
    """

    DEFAULT_CONFIG_DIR = str(Path(__file__).parent / 'profiles')
    DEFAULT_PROFILE = "default"

    def __init__(self, config_dir: str = None, profile: str = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Config instance.

        Args:
            config_dir (str, optional): Directory for config profiles.
                Defaults to 'profiles' subdirectory relative to this file.
            profile (str, optional): Profile name to use. Defaults to 'default'.
            config (dict, optional): Base configuration dictionary for JSONTool compatibility.
        """
        super().__init__(config)

        self.config_dir = config_dir or self.DEFAULT_CONFIG_DIR
        self.profile = profile or self.DEFAULT_PROFILE
        self.data = {}

        self._load()

    def run(self) -> Dict[str, Any]:
        """
        Run the config tool (implementation of abstract method from QuakeTool).

        Returns:
            The full configuration dictionary.
        """
        return self.get_full_config()

    def _load(self):
        """
        Load configuration from the profile JSON file.

        A missing or unreadable profile results in an empty configuration.
        """
        profile_path = Path(self.config_dir) / f"{self.profile}.json"

        if not profile_path.exists():
            if self.profile == self.DEFAULT_PROFILE:
                logger.debug(f"No default profile at '{profile_path}'. Using built-in defaults.")
            else:
                logger.warning(f"Profile '{self.profile}' not found. Using empty configuration.")
            self.data = {}
            return

        try:
            data = self.read_json(str(profile_path))
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration: {e}")
            self.data = {}
            return

        if not isinstance(data, dict):
            logger.error(f"Profile '{self.profile}' is not a JSON object. Using empty configuration.")
            self.data = {}
            return

        self.data = data
        logger.info(f"Loaded configuration from '{self.profile}'")

    def get(self, path: str = None, default: Any = None) -> Any:
        """
        Get a configuration value by path using dot notation.

        Args:
            path (str, optional): Dot notation path to the value
                (e.g., "paths.log_file", "report.format").
                If None, returns the entire configuration dictionary.
            default (Any, optional): Value to return if path not found.

        Returns:
            Any: The configuration value at the specified path, or default if not found.

        Examples:
            >>> config.get('report.format', 'json')
            'json'
        """
        if path is None:
            return self.data

        current = self.data
        for key in path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def list_profiles(self) -> List[str]:
        """
        List all available profile names.

        Returns:
            List[str]: Profile names (without .json extension) found in the config directory.
        """
        config_path = Path(self.config_dir)
        return sorted(f.stem for f in config_path.glob("*.json"))

    def switch_profile(self, profile: str) -> bool:
        """
        Switch to a different profile.

        Args:
            profile (str): Name of profile to switch to (without .json extension).

        Returns:
            bool: True if successful, False if profile not found.
        """
        profile_path = Path(self.config_dir) / f"{profile}.json"
        if profile_path.exists():
            self.profile = profile
            self._load()
            return True
        else:
            logger.warning(f"Profile '{profile}' not found.")
            return False

    def get_full_config(self) -> Dict[str, Any]:
        """
        Return the full configuration dictionary.
        """
        return self.data

    def get_path(self, path_key: str, fallback: str = None) -> str:
        """
        Get a resolved filesystem path from configuration.

        Args:
            path_key (str): Path key in dot notation (e.g., "paths.log_file")
            fallback (str, optional): Default path if not found

        Returns:
            str: Resolved absolute path. Returns empty string if path is None/empty.
                 Relative paths are resolved relative to the config directory.
        """
        path = self.get(path_key, fallback)
        if not path:
            return ""

        path_obj = Path(path)
        if path_obj.is_absolute():
            return str(path_obj)

        return str(Path(self.config_dir) / path)


# Global singleton instance for convenient access throughout the application
# Usage: from config import config; value = config.get('some.key')
config = Config()
