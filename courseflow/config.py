"""
Runtime configuration for courseflow.

Values come from module defaults, overridden by environment variables.
A `.env` file in the project root is loaded first when present.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_DATA_DIR = Path("data")
DEFAULT_CONTENT_DIR = DEFAULT_DATA_DIR / "courses"
DEFAULT_MODULE_MAP = DEFAULT_DATA_DIR / "modules.yaml"
DEFAULT_CATALOG = DEFAULT_DATA_DIR / "courseList.json"

DEFAULT_STATE_DIR = Path.home() / ".courseflow"
DEFAULT_PROGRESS_DB = DEFAULT_STATE_DIR / "progress.db"
DEFAULT_RESULTS_DB = DEFAULT_STATE_DIR / "results.db"

MAX_RETRIES = 3


def _env_path(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else default


@dataclass
class Settings:
    """Resolved paths and limits for one engine instance."""
    content_dir: Path = DEFAULT_CONTENT_DIR
    module_map: Path = DEFAULT_MODULE_MAP
    catalog: Path = DEFAULT_CATALOG
    progress_db: Path = DEFAULT_PROGRESS_DB
    results_db: Path = DEFAULT_RESULTS_DB
    max_retries: int = MAX_RETRIES

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from COURSEFLOW_* environment variables."""
        max_retries = int(os.environ.get("COURSEFLOW_MAX_RETRIES", MAX_RETRIES))
        if max_retries < 0:
            raise ValueError(f"COURSEFLOW_MAX_RETRIES must be >= 0, got {max_retries}")

        return cls(
            content_dir=_env_path("COURSEFLOW_CONTENT_DIR", DEFAULT_CONTENT_DIR),
            module_map=_env_path("COURSEFLOW_MODULE_MAP", DEFAULT_MODULE_MAP),
            catalog=_env_path("COURSEFLOW_CATALOG", DEFAULT_CATALOG),
            progress_db=_env_path("COURSEFLOW_PROGRESS_DB", DEFAULT_PROGRESS_DB),
            results_db=_env_path("COURSEFLOW_RESULTS_DB", DEFAULT_RESULTS_DB),
            max_retries=max_retries,
        )
