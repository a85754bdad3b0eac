"""Configuration management."""

from .global_config import GlobalConfig, RememberedUser
from .local_config import LocalConfig

__all__ = ["GlobalConfig", "RememberedUser", "LocalConfig"]
