import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "jobtracker" / "jobtracker.db"

_TRUTHY = {"1", "true", "yes", "on"}


def load_env() -> None:
    """Load .env from the working directory if present.
    Values already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        db = os.getenv("JOBTRACKER_DB")
        return cls(
            db_path=Path(db).expanduser() if db else DEFAULT_DB_PATH,
            log_level=os.getenv("JOBTRACKER_LOG_LEVEL", "INFO").upper(),
            log_dir=Path(os.getenv("JOBTRACKER_LOG_DIR", "logs")),
            log_to_file=os.getenv("JOBTRACKER_LOG_FILE", "").strip().lower() in _TRUTHY,
        )
