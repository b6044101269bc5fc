import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/jobboard.db"
DEFAULT_LOG_LEVEL = "INFO"


def load_env() -> None:
    """Load .env from the working directory if present.
    Values already in the environment are kept.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_database_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def get_log_level() -> str:
    return os.getenv("JOBBOARD_LOG_LEVEL") or DEFAULT_LOG_LEVEL


def get_log_dir() -> Optional[Path]:
    """Directory for log files, or None to log to the console only."""
    log_dir = os.getenv("JOBBOARD_LOG_DIR")
    return Path(log_dir) if log_dir else None
