"""Configuration management"""
import os
from datetime import date
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
# When false, progress lives in memory only and is lost on restart
PERSIST_PROGRESS: bool = os.getenv("PERSIST_PROGRESS", "false").lower() == "true"

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# API
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))
CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

# Activity dates
# Completions dated more than this many days after the user's "today" are rejected
MAX_FUTURE_DAYS: int = int(os.getenv("MAX_FUTURE_DAYS", "1"))
MIN_ACTIVITY_DATE: date = date.fromisoformat(os.getenv("MIN_ACTIVITY_DATE", "2000-01-01"))
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    from mindwell.exceptions import ConfigurationError
    import pytz

    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Unknown LOG_LEVEL: {LOG_LEVEL}", config_key="LOG_LEVEL")
    if MAX_FUTURE_DAYS < 0:
        raise ConfigurationError("MAX_FUTURE_DAYS must be >= 0", config_key="MAX_FUTURE_DAYS")
    if DEFAULT_TIMEZONE not in pytz.all_timezones_set:
        raise ConfigurationError(
            f"Unknown DEFAULT_TIMEZONE: {DEFAULT_TIMEZONE}",
            config_key="DEFAULT_TIMEZONE"
        )
    # API keys are optional for local use; routes reject requests without them
