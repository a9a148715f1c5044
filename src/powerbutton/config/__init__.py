"""Configuration: JSON file + env overrides."""

from powerbutton.config.config_manager import load_config

__all__ = ["load_config"]
