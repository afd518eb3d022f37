# src/homedash/config.py
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

_DATA_DIR = os.getenv("HOMEDASH_DATA_DIR", "data")


class Settings(BaseModel):
    app_name: str = "Homedash Config Store"

    # Storage
    data_dir: Path = Path(_DATA_DIR)
    config_path: Path = Path(os.getenv("HOMEDASH_CONFIG_PATH", os.path.join(_DATA_DIR, "config.json")))
    icons_dir: Path = Path(os.getenv("HOMEDASH_ICONS_DIR", os.path.join(_DATA_DIR, "icons")))

    # Uploads
    max_icon_bytes: int = Field(default=int(os.getenv("HOMEDASH_MAX_ICON_BYTES", str(2 * 1024 * 1024))), ge=1)

    # Presentation fallback when appTitle is unset
    default_app_title: str = os.getenv("HOMEDASH_DEFAULT_APP_TITLE", "Homedash")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def for_data_dir(cls, data_dir: str | Path, **overrides) -> "Settings":
        """
        Settings rooted at `data_dir` (config.json + icons/ underneath),
        ignoring the path-related environment variables.
        """
        root = Path(data_dir)
        values = {
            "data_dir": root,
            "config_path": root / "config.json",
            "icons_dir": root / "icons",
        }
        values.update(overrides)
        return cls(**values)


settings = Settings()
