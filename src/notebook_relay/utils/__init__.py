"""
Utility helpers for the relay service.
"""

from .urls import is_valid_url

__all__ = ["is_valid_url"]
