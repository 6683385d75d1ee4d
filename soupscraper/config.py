"""
Settings Module

Runtime configuration for the scraper, read from environment variables
prefixed with SOUPSCRAPER_ and from a .env file in the working directory.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

PARSERS = ('html.parser', 'lxml', 'html5lib')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class Settings(BaseSettings):
    """Scraper settings from environment"""
    model_config = SettingsConfigDict(env_prefix='SOUPSCRAPER_', extra='ignore')

    user_agent: str = Field(default='soupscraper/1.0', min_length=1)
    request_timeout: float = Field(default=10.0, gt=0)
    default_delay: float = Field(default=1.0, ge=0)
    max_pages: int = Field(default=50, ge=1)
    respect_robots: bool = Field(default=True)
    parser: str = Field(default='html.parser', pattern=r'^(html\.parser|lxml|html5lib)$')
    output_dir: str = Field(default='data')
    log_level: str = Field(default='INFO')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache(maxsize=1)
def get_settings():
    """
    Get the shared settings instance.

    Returns:
        Settings: Settings loaded from the environment
    """
    return Settings()
