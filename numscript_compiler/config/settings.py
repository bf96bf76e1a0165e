"""
Configuration Management for the Numscript Compiler

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The compiler itself is pure; settings only decide how strictly it treats
contract violations and how its output and logs are shaped.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompilerSettings(BaseSettings):
    """Numscript rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NUMSCRIPT_",
        extra="ignore"
    )

    strict_split_modes: bool = Field(
        default=False,
        description="Fail instead of warn when a split mixes fraction and max rules"
    )
    trailing_newline: bool = Field(
        default=True,
        description="End the generated script with a newline"
    )


class FlowSettings(BaseSettings):
    """
    Payload intake configuration.

    Only the orchestration flow reads these, so a bad value here never
    affects compiling an already-built Intent.
    """

    model_config = SettingsConfigDict(
        env_prefix="NUMSCRIPT_",
        extra="ignore"
    )

    default_asset: str = Field(
        default="USD/2",
        description="Asset applied to raw postings that omit one"
    )

    @field_validator('default_asset')
    @classmethod
    def validate_default_asset(cls, v: str) -> str:
        """Asset notation is SYMBOL or SYMBOL/SCALE, never blank."""
        v = v.strip()
        if not v or " " in v:
            raise ValueError(f"Invalid asset notation: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at debug level"
    )
    log_json: bool = Field(
        default=True,
        description="Render structured logs as JSON (False for console output)"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def compiler(self) -> CompilerSettings:
        return CompilerSettings()

    @property
    def flow(self) -> FlowSettings:
        return FlowSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for each failure.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.compiler
        results["compiler"] = True
    except Exception as e:
        results["compiler"] = False
        results["compiler_error"] = str(e)

    try:
        _ = settings.flow
        results["flow"] = True
    except Exception as e:
        results["flow"] = False
        results["flow_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
