"""Mini README: Centralised configuration models and helpers for Dispatchdrone.

Structure:
    * DispatchdroneSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read the upstream endpoint, planner iteration
    caps and service ports. Values come from ``DISPATCHDRONE_*`` environment
    variables or a ``.env`` file and are validated once per process.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatchdroneSettings(BaseSettings):
    """Runtime configuration for the Dispatchdrone planning service."""

    model_config = SettingsConfigDict(
        env_prefix="DISPATCHDRONE_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied when the service or CLI starts.",
    )
    ilp_endpoint: str = Field(
        "http://localhost:8080/",
        description="Base URL of the upstream service providing drones, service points and restricted areas.",
    )
    request_timeout_seconds: float = Field(
        10.0,
        description="Timeout applied to every upstream HTTP request.",
        gt=0,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the planning API to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the planning API exposes.",
        ge=1,
        le=65535,
    )
    greedy_max_iterations: int = Field(
        20_000,
        description="Step cap for the greedy heading search before a destination is declared unreachable.",
        ge=1,
    )
    astar_max_iterations: int = Field(
        50_000,
        description="Node expansion cap for the A* search.",
        ge=1,
    )

    @field_validator("ilp_endpoint")
    @classmethod
    def _normalise_endpoint(cls, value: str) -> str:
        """Ensure relative resource paths can be appended directly."""

        value = value.strip()
        return value if value.endswith("/") else value + "/"

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache()
def get_settings() -> DispatchdroneSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return DispatchdroneSettings()
