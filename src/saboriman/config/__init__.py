"""Configuration module for Saboriman."""

from .settings import (
    APISettings,
    DatabaseSettings,
    ObservabilitySettings,
    ScannerSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "APISettings",
    "DatabaseSettings",
    "ObservabilitySettings",
    "ScannerSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
