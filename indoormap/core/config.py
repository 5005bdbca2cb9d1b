"""
Configuration management for indoormap.

Loads parser defaults and rendering colors from JSON files.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
from loguru import logger

from indoormap.core.models import WallMaterial


DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.json"


def _clamp_channel(value: Any) -> int:
    return max(0, min(255, int(value)))


class Config:
    """Configuration manager for parser defaults and rendering rules."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to JSON config file. If None, uses the bundled default.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self._config = json.load(f)

        logger.info(f"Loaded config: {self._config.get('name', 'Unknown')}")

    @property
    def name(self) -> str:
        return self._config.get("name", "Unknown")

    def get_parser_default(self, param_name: str, default: Any = None) -> Any:
        """
        Get a parser default (e.g. 'wall_thickness').

        Args:
            param_name: Parameter name
            default: Default value if not found

        Returns:
            Parameter value or default
        """
        return self._config.get("parser_defaults", {}).get(param_name, default)

    def get_material_color(self, material: WallMaterial) -> Tuple[int, int, int]:
        """
        Get the RGB stroke color for a wall material.

        Channels are clamped to 0-255. Unlisted materials are black.
        """
        colors = self._config.get("render", {}).get("material_colors", {})
        rgb = colors.get(material.name, [0, 0, 0])
        r, g, b = rgb
        return (_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))

    def get_outline_color(self, kind: str, default: str = "#C8C8C8") -> str:
        """
        Get the fill color for an outline polygon.

        Args:
            kind: 'add', 'remove' or 'outdoor'
            default: Color used if the kind is not configured
        """
        return self._config.get("render", {}).get("outline_colors", {}).get(kind, default)

    def get_render_option(self, option_name: str, default: Any = None) -> Any:
        """Get a rendering option (marker radius, font, ...)."""
        return self._config.get("render", {}).get("options", {}).get(option_name, default)


# Global default config instance
_default_config: Optional[Config] = None


def get_default_config() -> Config:
    """Get the default global configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = Config()
    return _default_config


def load_config(config_path: str) -> Config:
    """
    Load configuration from a specific file.

    Args:
        config_path: Path to JSON config file

    Returns:
        Config instance
    """
    return Config(config_path)
