from .document_store import DocumentStore
from .icon_assets import IconAssetManager, IconFile

__all__ = ["DocumentStore", "IconAssetManager", "IconFile"]
