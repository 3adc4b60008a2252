"""Configuration module for FocusTracks."""

from .settings import (
    DatabaseSettings,
    MembershipSettings,
    ObservabilitySettings,
    Settings,
    YouTubeSettings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "MembershipSettings",
    "ObservabilitySettings",
    "Settings",
    "YouTubeSettings",
    "get_settings",
]
