from config.settings.base.core import BaseSettings, Environment, get_base_settings

__all__ = ["BaseSettings", "Environment", "get_base_settings"]
