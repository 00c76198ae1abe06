"""Runtime settings read from the environment and an optional ``.env`` file."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

ENV_PREFIX = "PERFMET_"
DEFAULT_LOGS_DIRNAME = "logs"
DEFAULT_BASELINES_DIRNAME = Path("data") / "baselines"


@dataclass(frozen=True)
class Settings:
    """Where logs are read from and where baselines are kept."""

    logs_dir: Path
    baselines_dir: Path
    database_url: Optional[str] = None
    log_level: str = "INFO"


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """Build settings from ``PERFMET_*`` variables.

    Values from ``env_file`` (or a ``.env`` found from the working directory)
    never override variables already set in the process environment.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    cwd = Path.cwd()
    logs_dir = os.getenv(f"{ENV_PREFIX}LOGS_DIR")
    baselines_dir = os.getenv(f"{ENV_PREFIX}BASELINES_DIR")

    return Settings(
        logs_dir=Path(logs_dir) if logs_dir else cwd / DEFAULT_LOGS_DIRNAME,
        baselines_dir=Path(baselines_dir) if baselines_dir else cwd / DEFAULT_BASELINES_DIRNAME,
        database_url=os.getenv(f"{ENV_PREFIX}DATABASE_URL") or None,
        log_level=(os.getenv(f"{ENV_PREFIX}LOG_LEVEL") or "INFO").upper(),
    )
