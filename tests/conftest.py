# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import pytest

from homedash.config import Settings
from homedash.dal import DocumentStore, IconAssetManager
from homedash.services import DashboardService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings.for_data_dir(data_dir)


@pytest.fixture
def store(settings: Settings) -> DocumentStore:
    return DocumentStore(settings.config_path)


@pytest.fixture
def icons(settings: Settings) -> IconAssetManager:
    return IconAssetManager(settings.icons_dir, max_bytes=settings.max_icon_bytes)


@pytest.fixture
def svc(store: DocumentStore, icons: IconAssetManager) -> DashboardService:
    return DashboardService(store, icons, default_app_title="Homedash")


@pytest.fixture
def media(svc: DashboardService):
    """A `media` category holding a single `plex` service."""
    svc.create_category({"id": "media", "name": "Media"})
    svc.create_service({
        "id": "plex",
        "name": "Plex",
        "description": "x",
        "url": "https://plex.local",
        "categoryId": "media",
        "active": True,
    })
    return svc


def icon_stems(icons_dir: Path) -> list[str]:
    if not icons_dir.exists():
        return []
    return sorted(p.stem for p in icons_dir.iterdir())
