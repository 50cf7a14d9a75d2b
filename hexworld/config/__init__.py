"""
Configuration modules for world generation.
"""

from .config import Settings, settings
from .world_shape import PRESETS, WorldShapeConfig, get_preset, list_presets

__all__ = ["WorldShapeConfig", "PRESETS", "get_preset", "list_presets", "Settings", "settings"]
