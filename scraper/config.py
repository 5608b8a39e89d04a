"""Runtime settings for the schedule converter."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .fetcher import DEFAULT_BASE_URL

USERNAME_ENV = "REMOTEUSER"
PASSWORD_ENV = "REMOTEPASS"
BASE_URL_ENV = "SHINBUKAN_BASE_URL"

NUM_MONTHS = 14  # two months back plus one year ahead
MONTHS_BACK = 2
MAX_WORKERS = 4


@dataclass
class Settings:
    username: str
    password: str
    base_url: str = DEFAULT_BASE_URL
    months: int = NUM_MONTHS
    months_back: int = MONTHS_BACK
    workers: int = MAX_WORKERS
    headless: bool = True

    def __post_init__(self) -> None:
        if self.months < 1:
            raise ValueError("Number of months must be at least 1")
        if self.months_back < 0:
            raise ValueError("Months back cannot be negative")
        if self.workers < 1:
            raise ValueError("Number of workers must be at least 1")


def load_env_file(path: Optional[str] = None) -> bool:
    """Load variables from a .env file into the environment.

    Variables already set in the environment win over the file. Without
    ``path`` the file is searched for from the working directory upwards.

    Returns:
        True if a file was found and loaded.
    """
    return load_dotenv(path or find_dotenv(usecwd=True))


def credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> tuple[str, str]:
    """Read basic auth credentials from the environment.

    Returns:
        Tuple of (username, password); missing values are empty strings.
    """
    env = os.environ if environ is None else environ
    return env.get(USERNAME_ENV, ""), env.get(PASSWORD_ENV, "")


def base_url_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get(BASE_URL_ENV) or DEFAULT_BASE_URL
