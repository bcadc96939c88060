"""
Zerocoin Configuration

Environment-based configuration for parameter generation, minting
and logging. Variables use the ZEROCOIN_ prefix.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ZEROCOIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Protocol
    security_level: int = Field(
        default=80,
        ge=1,
        description="Target symmetric security level in bits"
    )

    protocol_version: str = Field(
        default="1",
        description="Auxiliary string mixed into every parameter seed"
    )

    # Bounded search loops
    max_mint_attempts: int = Field(
        default=10000,
        gt=0,
        description="Commitments sampled before minting gives up"
    )

    mint_prime_rounds: int = Field(
        default=20,
        gt=0,
        description="Miller-Rabin rounds when testing a fresh coin commitment"
    )

    param_prime_rounds: int = Field(
        default=64,
        gt=0,
        description="Miller-Rabin rounds when validating group parameters"
    )

    max_primegen_attempts: int = Field(
        default=10000,
        gt=0,
        description="Candidate limit for the Shawe-Taylor prime construction"
    )

    max_generator_attempts: int = Field(
        default=10000,
        gt=0,
        description="Hash counter limit when deriving a group generator"
    )

    max_schnorrgen_attempts: int = Field(
        default=10000,
        gt=0,
        description="Cofactor limit when building a group of a given order"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_format: str = Field(
        default="text",
        description="Log format: json or text"
    )

    # Application
    app_name: str = Field(default="zerocoin")

    app_version: str = Field(default="0.1.0")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get library settings."""
    return settings
