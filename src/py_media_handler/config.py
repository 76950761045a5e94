"""统一配置管理模块。

提供媒体处理的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class MediaDefaults:
    """媒体解析相关的默认配置"""

    # 组件实例上用于覆盖的属性名
    PN_MEDIA_REF: str = "mediaRef"
    PN_MEDIA_CROP: str = "mediaCrop"
    PN_MEDIA_ROTATION: str = "mediaRotation"

    # 组件定义（可继承）上的属性名
    PN_COMPONENT_MEDIA_FORMATS: str = "mediaFormats"
    PN_COMPONENT_MEDIA_FORMATS_MANDATORY: str = "mediaFormatsMandatory"
    PN_COMPONENT_MEDIA_AUTOCROP: str = "mediaAutoCrop"

    # 资源元数据字段
    METADATA_TITLE: str = "dc:title"
    METADATA_DESCRIPTION: str = "dc:description"

    # 渲染版本命名约定
    ORIGINAL_RENDITION: str = "original"
    WEB_RENDITION_PREFIX: str = "web."
    THUMBNAIL_RENDITION_PREFIX: str = "thumbnail."

    # 渲染版本选择
    INCLUDE_WEB_RENDITIONS: bool = True

    # URL 构建
    SITE_URL: str = ""
    DOWNLOAD_PARAMETER: str = "download=attachment"

    # 占位图
    ENABLE_DUMMY_IMAGES: bool = False
    DUMMY_IMAGE_URL: str = "/static/media/dummy.png"


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.media = MediaDefaults()
        self.logging = LoggingDefaults()
        self.media_formats_file: str | None = None

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        if site_url := os.getenv("PMH_SITE_URL"):
            object.__setattr__(self.media, "SITE_URL", site_url.rstrip("/"))

        if dummy_url := os.getenv("PMH_DUMMY_IMAGE_URL"):
            object.__setattr__(self.media, "DUMMY_IMAGE_URL", dummy_url)

        if enable_dummy := os.getenv("PMH_ENABLE_DUMMY_IMAGES"):
            object.__setattr__(
                self.media,
                "ENABLE_DUMMY_IMAGES",
                enable_dummy.lower() in ("true", "1", "yes"),
            )

        if include_web := os.getenv("PMH_INCLUDE_WEB_RENDITIONS"):
            object.__setattr__(
                self.media,
                "INCLUDE_WEB_RENDITIONS",
                include_web.lower() in ("true", "1", "yes"),
            )

        # 日志配置
        if log_level := os.getenv("PMH_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        self.media_formats_file = os.getenv("PMH_MEDIA_FORMATS_FILE")


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
