"""Python 媒体解析库。

把内容节点上的媒体引用解析为满足格式、尺寸和裁剪约束的渲染版本，
并生成对应的 URL 和标记。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "媒体引用解析库，基于 pydantic 和 Pillow"

# 核心功能导出
from .core import Asset, MediaBuilder, MediaHandler
from .exceptions import (
    AssetStoreError,
    MediaError,
    MissingDimensionError,
    UnsupportedAssetTypeError,
    ValidationError,
)
from .models import (
    CropDimension,
    Media,
    MediaArgs,
    MediaFormat,
    MediaInvalidReason,
    MediaRequest,
    Rendition,
    Resource,
    UrlMode,
)
from .store import FileSystemAssetStore, InMemoryAssetStore


__all__ = [
    "Asset",
    "AssetStoreError",
    "CropDimension",
    "FileSystemAssetStore",
    "InMemoryAssetStore",
    "Media",
    "MediaArgs",
    "MediaBuilder",
    "MediaError",
    "MediaFormat",
    "MediaHandler",
    "MediaInvalidReason",
    "MediaRequest",
    "MissingDimensionError",
    "Rendition",
    "Resource",
    "UnsupportedAssetTypeError",
    "UrlMode",
    "ValidationError",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
