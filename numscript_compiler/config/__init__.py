"""Configuration package."""

from numscript_compiler.config.settings import (
    AppSettings,
    CompilerSettings,
    FlowSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CompilerSettings",
    "FlowSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
