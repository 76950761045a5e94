#!/usr/bin/env python3
"""媒体解析演示脚本。

展示 py_media_handler 库的核心功能，包括：
- 按资源引用解析默认渲染版本
- 媒体格式与自动裁剪
- 组件实例上的裁剪/旋转参数
- 响应式 srcset 与 <picture>
- 无效结果与占位图
"""

import json
from pathlib import Path

from PIL import Image

from py_media_handler import (
    FileSystemAssetStore,
    MediaFormat,
    MediaHandler,
    Resource,
)
from py_media_handler.models.constants import UriTemplateType


def get_asset_root() -> Path:
    """在项目的 tmp 目录生成演示资源"""
    project_root = Path(__file__).parent.parent
    root = project_root / "tmp" / "media_demo"
    photos = root / "photos"
    renditions = photos / "harbor.jpg.renditions"
    renditions.mkdir(parents=True, exist_ok=True)

    Image.new("RGB", (1600, 1200), color="steelblue").save(photos / "harbor.jpg", "JPEG")
    Image.new("RGB", (800, 600), color="steelblue").save(
        renditions / "web.800.600.jpg", "JPEG"
    )
    Image.new("RGB", (140, 105), color="steelblue").save(
        renditions / "thumbnail.140.105.png", "PNG"
    )
    (photos / "harbor.jpg.metadata.json").write_text(
        json.dumps({"dc:title": "Harbor", "dc:description": "Boats in the harbor"}),
        encoding="utf-8",
    )
    return root


def create_handler(root: Path) -> MediaHandler:
    media_formats = [
        MediaFormat(name="standard", label="Standard 4:3", ratio=4 / 3),
        MediaFormat(name="square", label="Square", ratio=1.0),
        MediaFormat(name="teaser", width=400, height=300),
    ]
    return MediaHandler(FileSystemAssetStore(root, url_prefix="/assets"), media_formats)


def demo_default_rendition(handler: MediaHandler):
    """演示默认渲染版本"""
    print("\n📷 默认渲染版本")
    print("=" * 50)

    media = handler.get("/photos/harbor.jpg").build()
    print(f"  有效: {media.is_valid}")
    print(f"  URL: {media.url}")
    print(f"  尺寸: {media.rendition.width}x{media.rendition.height}")
    print(f"  文件大小: {media.rendition.get_file_size_human()}")
    print(f"  标记: {media.markup}")


def demo_media_formats(handler: MediaHandler):
    """演示媒体格式与自动裁剪"""
    print("\n📐 媒体格式")
    print("=" * 50)

    for names, auto_crop in ((["teaser"], False), (["square"], False), (["square"], True)):
        media = (
            handler.get("/photos/harbor.jpg")
            .media_format_names(*names)
            .auto_crop(auto_crop)
            .build()
        )
        label = f"{','.join(names)}{' (自动裁剪)' if auto_crop else ''}"
        if media.is_valid:
            print(f"  ✅ {label}: {media.url}")
        else:
            print(f"  ❌ {label}: {media.media_invalid_reason.value}")


def demo_component_overrides(handler: MediaHandler):
    """演示组件实例上的裁剪和旋转"""
    print("\n✂️ 裁剪与旋转")
    print("=" * 50)

    resource = Resource(
        path="/content/home/jcr:content/hero",
        properties={
            "mediaRef": "/photos/harbor.jpg",
            "mediaCrop": "100,50,500,350",
            "mediaRotation": 90,
        },
    )
    media = handler.get(resource).build()
    print(f"  预览版裁剪: {media.crop_dimension.to_crop_string()}")
    print(f"  原图裁剪: {media.rendition.crop.to_crop_string()}")
    print(f"  输出尺寸: {media.rendition.width}x{media.rendition.height}")
    print(f"  URL: {media.url}")


def demo_responsive(handler: MediaHandler):
    """演示响应式图片"""
    print("\n📱 响应式图片")
    print("=" * 50)

    media = (
        handler.get("/photos/harbor.jpg")
        .image_sizes("(min-width: 800px) 50vw, 100vw", 400, 800)
        .build()
    )
    print(f"  srcset: {media.element.attributes.get('srcset')}")

    standard = handler.get_media_format("standard")
    picture = (
        handler.get("/photos/harbor.jpg")
        .picture_source(standard, 400, 800, media="(min-width: 600px)")
        .build()
    )
    print(f"  picture: {picture.markup}")

    template = picture.asset.get_uri_template(UriTemplateType.SCALE_WIDTH)
    print(f"  URI 模板: {template.template}")
    print(f"  展开 640: {template.expand(width=640)}")


def demo_invalid(handler: MediaHandler):
    """演示无效结果"""
    print("\n⚠️ 无效结果")
    print("=" * 50)

    for media in (
        handler.get("/photos/missing.jpg").build(),
        handler.get("/photos/harbor.jpg").media_format_names("unknown").build(),
        handler.get(
            Resource(
                path="/content/x",
                properties={"mediaRef": "/photos/harbor.jpg", "mediaRotation": 45},
            )
        ).build(),
    ):
        print(f"  {media.media_invalid_reason.value}: {media.invalid_message}")


def main():
    """主演示函数"""
    print("🚀 py_media_handler 演示")

    root = get_asset_root()
    handler = create_handler(root)

    demo_default_rendition(handler)
    demo_media_formats(handler)
    demo_component_overrides(handler)
    demo_responsive(handler)
    demo_invalid(handler)

    print(f"\n📁 演示资源目录: {root}")


if __name__ == "__main__":
    main()
