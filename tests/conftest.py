"""测试配置文件。

提供测试所需的fixtures和配置。
"""

from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from py_media_handler.config import get_config, reset_config
from py_media_handler.core.handler import MediaHandler
from py_media_handler.models.media_options import MediaFormat
from py_media_handler.models.resource import Resource
from py_media_handler.store.base import InMemoryAssetStore
from py_media_handler.store.models import StoreAsset, StoreRendition


ENV_VARS = (
    "PMH_SITE_URL",
    "PMH_DUMMY_IMAGE_URL",
    "PMH_ENABLE_DUMMY_IMAGES",
    "PMH_INCLUDE_WEB_RENDITIONS",
    "PMH_LOG_LEVEL",
    "PMH_MEDIA_FORMATS_FILE",
)

IMAGE_REF = "/content/dam/sample.jpg"
WEB_RENDITION_URL = "/content/dam/sample.jpg/renditions/web.800.600.jpg"


@pytest.fixture(autouse=True)
def media_config(monkeypatch):
    """每个测试使用不受环境影响的默认配置"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield get_config()
    reset_config()


def create_image_asset(**kwargs: Any) -> StoreAsset:
    """创建带原图、网页预览版和缩略图的图片资源"""
    defaults: dict[str, Any] = {
        "path": IMAGE_REF,
        "name": "sample.jpg",
        "metadata": {"dc:title": "Sample", "dc:description": "A sample image"},
        "renditions": (
            StoreRendition(
                name="original",
                url=IMAGE_REF,
                mime_type="image/jpeg",
                width=1600,
                height=1200,
                file_size=524288,
            ),
            StoreRendition(
                name="web.800.600.jpg",
                url=WEB_RENDITION_URL,
                mime_type="image/jpeg",
                width=800,
                height=600,
                file_size=131072,
            ),
            StoreRendition(
                name="thumbnail.140.105.png",
                url="/content/dam/sample.jpg/renditions/thumbnail.140.105.png",
                mime_type="image/png",
                width=140,
                height=105,
            ),
        ),
    }
    defaults.update(kwargs)
    return StoreAsset(**defaults)


@pytest.fixture
def image_asset() -> StoreAsset:
    return create_image_asset()


@pytest.fixture
def store(image_asset: StoreAsset) -> InMemoryAssetStore:
    """包含各种类型资源的内存存储"""
    return InMemoryAssetStore(
        [
            image_asset,
            StoreAsset(
                path="/content/dam/doc.pdf",
                name="doc.pdf",
                renditions=(
                    StoreRendition(
                        name="original", url="/content/dam/doc.pdf", file_size=2048
                    ),
                ),
            ),
            StoreAsset(
                path="/content/dam/movie.swf",
                name="movie.swf",
                renditions=(
                    StoreRendition(
                        name="original",
                        url="/content/dam/movie.swf",
                        width=640,
                        height=480,
                    ),
                ),
            ),
            StoreAsset(
                path="/content/dam/logo.svg",
                name="logo.svg",
                renditions=(
                    StoreRendition(
                        name="original",
                        url="/content/dam/logo.svg",
                        width=100,
                        height=100,
                    ),
                ),
            ),
            StoreAsset(
                path="/content/dam/broken.jpg",
                name="broken.jpg",
                renditions=(
                    StoreRendition(name="original", url="", width=400, height=300),
                ),
            ),
        ]
    )


@pytest.fixture
def media_formats() -> list[MediaFormat]:
    return [
        MediaFormat(name="square", ratio=1.0),
        MediaFormat(name="wide", ratio=16 / 9),
        MediaFormat(name="standard", label="Standard 4:3", ratio=4 / 3),
        MediaFormat(name="teaser", width=400, height=300),
        MediaFormat(name="download", download=True, extensions=("pdf",)),
    ]


def create_handler(
    store: InMemoryAssetStore, media_formats: list[MediaFormat] | None = None, **kwargs
) -> MediaHandler:
    """创建媒体处理器，提供默认值"""
    return MediaHandler(store, media_formats=media_formats or [], **kwargs)


@pytest.fixture
def handler(store: InMemoryAssetStore, media_formats: list[MediaFormat]) -> MediaHandler:
    return create_handler(store, media_formats)


def create_resource(path: str = "/content/page/jcr:content/image", **properties) -> Resource:
    """创建组件实例节点"""
    return Resource(path=path, properties=properties)


def create_image_file(path: Path, size: tuple[int, int], fmt: str = "JPEG") -> Path:
    """生成测试图片文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color="white").save(path, fmt)
    return path
