"""Configuration package for Notebook Relay."""

from .settings import RelaySettings, get_settings

__all__ = ["RelaySettings", "get_settings"]
