"""
Configuration module for the event-management backend.

Provides centralized configuration for:
- Statistics service connection
- Participation request policy
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
