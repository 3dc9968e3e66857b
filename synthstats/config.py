"""
Application configuration settings.
"""
from pydantic_settings import BaseSettings
from pathlib import Path
import logging


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - PostgreSQL for production, SQLite for local
    DATABASE_URL: str = ""  # PostgreSQL connection string (production)
    DATABASE_PATH: str = "data/synthstats.db"  # SQLite path (local fallback)
    USE_POSTGRES: bool = False  # Set to True to use PostgreSQL

    # Reference data (counties, county subdivisions, disease mapping CSVs)
    REFERENCE_DATA_DIR: str = "data/reference"

    # Geography key reserved by the census files for "not defined"
    UNDEFINED_GEO_KEY: str = "00000"

    # Coding system used to map conditions to tracked diseases
    SNOMED_CODE_SYSTEM: str = "http://snomed.info/sct"

    # Number of lock shards in the update staging cache
    STAGING_SHARDS: int = 16

    # Logging
    LOG_LEVEL: str = "INFO"

    # API settings
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "SynthStats"
    VERSION: str = "1.0.0"

    @property
    def database_url(self) -> str:
        """Get database URL - PostgreSQL if configured, else SQLite."""
        if self.USE_POSTGRES and self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.DATABASE_PATH}"

    @property
    def is_postgres(self) -> bool:
        """Check if using PostgreSQL."""
        return self.USE_POSTGRES and bool(self.DATABASE_URL)

    @property
    def base_dir(self) -> Path:
        """Get base directory of the project."""
        return Path(__file__).parent.parent

    class Config:
        env_file = ".env"
        extra = "allow"


# Global settings instance
settings = Settings()


def configure_logging(level: str = None):
    """Apply the project log format and level to the root logger."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def ensure_directories():
    """Create necessary directories if they don't exist."""
    dirs = [settings.REFERENCE_DATA_DIR]
    if not settings.is_postgres:
        dirs.append(str(Path(settings.DATABASE_PATH).parent))
    for dir_path in dirs:
        Path(dir_path).mkdir(parents=True, exist_ok=True)
