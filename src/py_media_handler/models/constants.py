"""媒体处理相关常量定义。

文件类型分类基于 Pillow 的动态格式能力，避免硬编码重复。
"""

from enum import Enum
from typing import Final

from PIL import Image


class UrlMode(str, Enum):
    """URL 构建模式"""

    DEFAULT = "default"  # 站点相对路径
    NO_HOSTNAME = "no_hostname"
    FULL_URL = "full_url"  # 带站点前缀的完整 URL


class DragDropSupport(str, Enum):
    """编辑器拖放支持模式"""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class RenditionType(str, Enum):
    """渲染版本类型分类（每个渲染版本只属于一种）"""

    IMAGE = "image"
    FLASH = "flash"
    DOWNLOAD = "download"


class UriTemplateType(str, Enum):
    """URI 模板类型"""

    CROP_CENTER = "crop_center"
    SCALE_WIDTH = "scale_width"
    SCALE_HEIGHT = "scale_height"


class MediaInvalidReason(str, Enum):
    """媒体解析失败原因"""

    MEDIA_REFERENCE_MISSING = "media_reference_missing"
    MEDIA_REFERENCE_INVALID = "media_reference_invalid"
    INVALID_MEDIA_FORMAT = "invalid_media_format"
    INVALID_CROP = "invalid_crop"
    INVALID_ROTATION = "invalid_rotation"
    NO_MATCHING_RENDITION = "no_matching_rendition"
    NOT_ENOUGH_MATCHING_RENDITIONS = "not_enough_matching_renditions"


class MediaFileType:
    """基于扩展名的文件类型分类"""

    # 浏览器可直接显示的图片
    WEB_IMAGE_EXTENSIONS: Final[set[str]] = {
        "jpg",
        "jpeg",
        "png",
        "gif",
        "webp",
        "avif",
        "svg",
    }

    # 矢量图，不能按像素缩放或裁剪
    VECTOR_EXTENSIONS: Final[set[str]] = {"svg", "svgz"}

    FLASH_EXTENSIONS: Final[set[str]] = {"swf"}

    # 只定义 Pillow 未提供的 MIME 类型
    SPECIAL_MIME_TYPES: Final[dict[str, str]] = {
        "svg": "image/svg+xml",
        "svgz": "image/svg+xml",
        "swf": "application/x-shockwave-flash",
        "pdf": "application/pdf",
        "zip": "application/zip",
        "mp4": "video/mp4",
    }

    @classmethod
    def normalize_extension(cls, extension: str | None) -> str:
        """统一为小写且不带点的扩展名"""
        if not extension:
            return ""
        return extension.strip().lower().lstrip(".")

    @classmethod
    def get_extension(cls, file_name: str | None) -> str:
        """从文件名中取扩展名"""
        if not file_name or "." not in file_name:
            return ""
        return cls.normalize_extension(file_name.rsplit(".", 1)[1])

    @classmethod
    def is_image(cls, extension: str) -> bool:
        """是否为可显示的图片"""
        return cls.normalize_extension(extension) in cls.WEB_IMAGE_EXTENSIONS

    @classmethod
    def is_vector_image(cls, extension: str) -> bool:
        """是否为矢量图"""
        return cls.normalize_extension(extension) in cls.VECTOR_EXTENSIONS

    @classmethod
    def is_raster_image(cls, extension: str) -> bool:
        """是否为 Pillow 可处理的位图"""
        ext = cls.normalize_extension(extension)
        return (
            cls.is_image(ext)
            and not cls.is_vector_image(ext)
            and f".{ext}" in Image.registered_extensions()
        )

    @classmethod
    def is_flash(cls, extension: str) -> bool:
        """是否为 Flash 文件"""
        return cls.normalize_extension(extension) in cls.FLASH_EXTENSIONS

    @classmethod
    def classify(cls, extension: str) -> RenditionType:
        """返回渲染版本类型"""
        if cls.is_image(extension):
            return RenditionType.IMAGE
        if cls.is_flash(extension):
            return RenditionType.FLASH
        return RenditionType.DOWNLOAD

    @classmethod
    def get_mime_type(cls, extension: str) -> str:
        """动态获取 MIME 类型，优先使用 Pillow 信息"""
        ext = cls.normalize_extension(extension)

        # 先检查特殊映射
        if ext in cls.SPECIAL_MIME_TYPES:
            return cls.SPECIAL_MIME_TYPES[ext]

        format_name = Image.registered_extensions().get(f".{ext}")
        if format_name:
            mime_type = Image.MIME.get(format_name.upper())
            return mime_type or f"image/{format_name.lower()}"

        return "application/octet-stream"
