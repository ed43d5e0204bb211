"""Runtime configuration."""

from .settings import PROJECT_ROOT, Settings, get_settings, load_config_section

__all__ = ["PROJECT_ROOT", "Settings", "get_settings", "load_config_section"]
