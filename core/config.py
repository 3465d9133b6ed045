"""Configuration management for the arxiv-search client."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "ARXIV_SEARCH_"


class Settings(BaseModel):
    """Client settings."""

    version: str = Field(default="0.1.0", description="Package version")

    # ArXiv Settings
    arxiv_api_base_url: str = Field(
        default="https://export.arxiv.org/api/query", description="ArXiv API full URL"
    )
    arxiv_timeout: float = Field(
        default=30.0, description="HTTP timeout for a search request in seconds"
    )
    arxiv_user_agent: str = Field(
        default="arxiv-search/0.1.0", description="User-Agent header sent to arXiv"
    )
    arxiv_min_request_interval: float = Field(
        default=3.0,
        description=(
            "Minimum delay between requests required by the arXiv terms of use. "
            "Callers are responsible for honoring it."
        ),
    )


def load_settings() -> Settings:
    """Load settings from environment variables and an optional .env file."""
    load_dotenv()

    defaults = Settings()
    return Settings(
        arxiv_api_base_url=os.getenv(
            f"{ENV_PREFIX}API_BASE_URL", defaults.arxiv_api_base_url
        ),
        arxiv_timeout=float(
            os.getenv(f"{ENV_PREFIX}TIMEOUT", str(defaults.arxiv_timeout))
        ),
        arxiv_user_agent=os.getenv(
            f"{ENV_PREFIX}USER_AGENT", defaults.arxiv_user_agent
        ),
    )


# Global settings instance
settings = load_settings()
