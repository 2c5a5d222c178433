"""Configuration management for the TopicGraph CLI.

Stores defaults in the user's home directory.
"""

import json
from pathlib import Path
from typing import Any, Optional


DEFAULTS = {
    "database": "topicgraph.db",
    "max_nodes": 10,
    "regularization_weight": 10.0,
    "minimum_sample_size": 1,
    "category_threshold": 0.5,
}


class CLIConfig:
    """Manages persisted CLI settings."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_path: Path to config file. Defaults to ~/.topicgraph/config.json
        """
        if config_path is None:
            config_dir = Path.home() / ".topicgraph"
            config_dir.mkdir(exist_ok=True)
            config_path = config_dir / "config.json"

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> dict:
        """Load config from file or create default."""
        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                return {**DEFAULTS, **json.load(f)}
        return dict(DEFAULTS)

    def _save_config(self) -> None:
        """Save config to file."""
        self.config_path.parent.mkdir(exist_ok=True, parents=True)
        with open(self.config_path, 'w') as f:
            json.dump(self._config, f, indent=2)

    def get(self, key: str) -> Any:
        return self._config.get(key, DEFAULTS.get(key))

    def set(self, key: str, value: str) -> None:
        """Set a setting, converting the value to the default's type."""
        if key not in DEFAULTS:
            raise ValueError(f"Unknown setting: {key}. Valid settings: {', '.join(DEFAULTS)}")

        kind = type(DEFAULTS[key])
        try:
            converted = kind(value)
        except ValueError:
            raise ValueError(f"{key} must be of type {kind.__name__}")

        if key == "max_nodes" and converted < 1:
            raise ValueError("max_nodes must be at least 1")
        if key == "category_threshold" and not 0.0 <= converted <= 1.0:
            raise ValueError("category_threshold must be within [0, 1]")

        self._config[key] = converted
        self._save_config()

    def show(self) -> dict:
        """Get all settings."""
        return dict(self._config)

    def clear(self) -> None:
        """Reset all settings to defaults."""
        self._config = dict(DEFAULTS)
        self._save_config()
