"""
Configuration management for SiteTrack
Handles loading and saving API settings and view preferences
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

DEFAULT_CONFIG_DIR = Path.home() / ".sitetrack"


class Config:
    """Configuration manager for the work-item engine"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to ~/.sitetrack)
        """
        if config_dir is None:
            config_dir = DEFAULT_CONFIG_DIR

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.preferences_file = self.config_dir / "preferences.json"

        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.preferences = self._load_json(self.preferences_file, self._default_preferences())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file, filling in missing keys from defaults"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            return {**default, **loaded}
        else:
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default connection settings"""
        return {
            "api_base_url": "http://localhost:5000/api/",
            "request_timeout": 15.0,
            "log_level": "WARNING",
        }

    def _default_preferences(self) -> Dict[str, Any]:
        """Default view preferences"""
        return {
            "list_view_limit": 20,
            "default_tab": "issues",
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'preferences')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "preferences": self.preferences,
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'preferences')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "preferences": (self.preferences, self.preferences_file),
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    @property
    def api_base_url(self) -> str:
        return self.settings["api_base_url"]

    @property
    def request_timeout(self) -> float:
        return float(self.settings["request_timeout"])

    @property
    def list_view_limit(self) -> Optional[int]:
        """Maximum items in a list view; None means no limit"""
        limit = self.preferences.get("list_view_limit")
        return None if limit is None else int(limit)

    @property
    def default_tab(self) -> str:
        tab = self.preferences.get("default_tab")
        return tab if tab in ("tasks", "issues") else "issues"

    @property
    def log_level(self) -> int:
        """Logging level from settings; unknown names fall back to WARNING"""
        level = logging.getLevelName(str(self.settings.get("log_level", "WARNING")).upper())
        return level if isinstance(level, int) else logging.WARNING
