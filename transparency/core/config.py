"""Application configuration settings.

This module defines the application-wide settings using Pydantic's BaseSettings.
It allows for loading configurations from environment variables and .env files,
providing type validation and default values.
"""

from typing import Annotated

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import NoDecode

# Default list of CORS allowed origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://localhost:8000",
    "http://0.0.0.0:8000",
]


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        assistant_base_url: Base address of the assistant service (questions, scoring, analysis).
        ASSISTANT_CONNECT_TIMEOUT: Assistant client connect timeout in seconds.
        ASSISTANT_READ_TIMEOUT: Assistant client read timeout in seconds.
        clamp_assistant_scores: Clamp assistant scores into [0, 100] before persisting. Off by default.
        mongo_uri: MongoDB connection string. When unset, products are kept in memory.
        mongo_db: MongoDB database name.
        mongo_collection: MongoDB collection holding product records.
        cors_allowed_origins: List of allowed origins for CORS.
    """

    assistant_base_url: str = Field(default="http://localhost:5000")
    ASSISTANT_CONNECT_TIMEOUT: float = Field(default=5.0, description="Assistant client connect timeout in seconds.")
    ASSISTANT_READ_TIMEOUT: float = Field(default=30.0, description="Assistant client read timeout in seconds.")
    clamp_assistant_scores: bool = Field(default=False)

    mongo_uri: str | None = Field(default=None)
    mongo_db: str = Field(default="transparency")
    mongo_collection: str = Field(default="products")

    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
    )

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
    }

    @field_validator("cors_allowed_origins", mode="before")  # type: ignore
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins.

        If 'v' is a string, it splits it by commas. If 'v' is already a list,
        it's used directly. Otherwise, returns the default list of origins.
        """
        if isinstance(v, str) and v:
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            return v
        return list(DEFAULT_CORS_ORIGINS)


settings = Settings()
