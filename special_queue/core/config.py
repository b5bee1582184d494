"""
App Configuration.

This module defines the global application settings using Pydantic Settings.
It loads configuration variables from environment variables and/or a .env file,
ensuring typed and validated settings for the queue demo and its HTTP surface.

Attributes:
    settings: The global instance of the Settings class, ready to be imported and used.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SEED_MESSAGES = [
    "occasion",
    "twin",
    "intention",
    "arrow",
    "draw",
    "forest",
    "special",
    "please",
    "shell",
    "momentum",
]


class Settings(BaseSettings):
    """
    Application Settings.

    Attributes:
        PROJECT_NAME: The name of the project (default: "Special Queue").
        LOG_LEVEL: Root log level passed to setup_logging.
        PRODUCE_INTERVAL: Seconds between two inserts of the self-seeding producer.
        WAIT_TIMEOUT: Seconds before the self-test gives up on finding a match.
        TARGET_MESSAGE: The message the self-test waits for.
        SEED_MESSAGES: Messages the producer inserts, in order.
        PRODUCER_ENABLED: Start the producer in the FastAPI lifespan.
    """

    # Core
    PROJECT_NAME: str = "Special Queue"
    LOG_LEVEL: str = "INFO"

    # Self-test harness
    PRODUCE_INTERVAL: float = Field(default=1.0, gt=0)
    WAIT_TIMEOUT: float = Field(default=10.0, gt=0)
    TARGET_MESSAGE: str = "special"
    SEED_MESSAGES: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SEED_MESSAGES)
    )

    # HTTP
    PRODUCER_ENABLED: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )


settings = Settings()
