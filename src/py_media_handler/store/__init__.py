"""资源存储包。

定义外部资源存储的接口和内置实现。
"""

from .base import AssetStore, InMemoryAssetStore, normalize_ref
from .filesystem import FileSystemAssetStore
from .models import StoreAsset, StoreRendition


__all__ = [
    "AssetStore",
    "FileSystemAssetStore",
    "InMemoryAssetStore",
    "StoreAsset",
    "StoreRendition",
    "normalize_ref",
]
