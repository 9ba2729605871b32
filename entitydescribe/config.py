"""
Runtime settings for describe documents.

Read from the environment (optionally seeded from a .env file):

    DESCRIBE_BASE_URL   prefix for every generated link (default: "")
    DESCRIBE_LOCALE     locale used for descriptions and labels (default: en)
    DESCRIBE_LOG_LEVEL  DEBUG, INFO, WARNING, ERROR (default: INFO)
    DESCRIBE_LOG_DIR    write log files here; unset disables file logging
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .env import load_env

DESCRIBE = "describe"
SLASH_DESCRIBE = "/" + DESCRIBE
FAKE_ID = ":ID:"


@dataclass(frozen=True)
class DescribeSettings:
    base_url: str = ""
    locale: str = "en"
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "DescribeSettings":
        load_env(env_path)
        log_dir = os.getenv("DESCRIBE_LOG_DIR")
        return cls(
            base_url=os.getenv("DESCRIBE_BASE_URL", "").rstrip("/"),
            locale=os.getenv("DESCRIBE_LOCALE", "en") or "en",
            log_level=os.getenv("DESCRIBE_LOG_LEVEL", "INFO").upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )

    @property
    def describe_url(self) -> str:
        return self.base_url + SLASH_DESCRIBE

    def prefix_describe_url(self, prefix: str) -> str:
        return f"{self.base_url}/{prefix}{SLASH_DESCRIBE}"

    def full_url(self, path: str) -> str:
        return self.base_url + path

    def logger_kwargs(self) -> dict:
        """Keyword arguments for get_logger() matching these settings."""
        return {
            "level": self.log_level,
            "log_dir": self.log_dir,
            "enable_file": self.log_dir is not None,
        }
