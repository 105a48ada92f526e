"""
Tracker configuration using Pydantic Settings.

This module provides configuration management for the order-book tracker,
allowing environment-based configuration with type validation and defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.tracker.enums import Exchange


class ConnectionConfig(BaseSettings):
    """WebSocket connection configuration."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_CONNECTION_")

    # Connection settings
    ws_url: str = "wss://api.hitbtc.com/api/2/ws"
    max_frame_size: int = Field(
        default=256 * 1024,
        ge=1024,
        description="Largest accepted frame in bytes (snapshots are big)",
    )
    ping_interval: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description="Keep-alive ping interval in seconds",
    )
    ping_timeout: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Seconds to wait for a pong before dropping the connection",
    )
    open_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Seconds to wait for the opening handshake",
    )

    # Resilience settings
    reconnect_enabled: bool = Field(
        default=False,
        description="Reconnect after transport failures instead of exiting",
    )
    reconnect_interval: float = Field(
        default=1.0,
        ge=0.1,
        le=10.0,
        description="Initial reconnect interval in seconds",
    )
    max_reconnect_interval: float = Field(
        default=60.0,
        ge=1.0,
        le=300.0,
        description="Maximum reconnect interval in seconds",
    )
    backoff_factor: float = Field(
        default=2.0,
        ge=1.0,
        le=5.0,
        description="Exponential backoff multiplier",
    )
    max_reconnect_attempts: int = Field(
        default=0,  # 0 = infinite
        ge=0,
        description="Maximum reconnection attempts (0 = infinite)",
    )


class DisplayConfig(BaseSettings):
    """Console output configuration."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_DISPLAY_")

    volume_mode: bool = Field(
        default=False, description="Print best bid/ask sizes alongside prices"
    )
    show_symbol: bool | None = Field(
        default=None,
        description="Prefix lines with the symbol (default: only when tracking several)",
    )
    color: bool = Field(default=True, description="Highlight changes with color")


class TrackerConfig(BaseSettings):
    """Root configuration combining all sub-configs."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_")

    # Sub-configurations
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    # Global settings
    exchange: Exchange = Exchange.HITBTC
    skip_malformed_updates: bool = Field(
        default=False,
        description="Drop an update with a malformed level instead of aborting",
    )
    debug: bool = False
    log_level: str = Field(
        default="WARNING",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        """
        Load configuration from environment variables.

        Returns:
            Configured TrackerConfig instance

        """
        return cls(
            connection=ConnectionConfig(),
            display=DisplayConfig(),
        )
