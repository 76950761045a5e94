"""媒体解析 MCP 服务器。

在本地目录上提供媒体引用解析和资源信息查询。
"""

import json
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .core.handler import MediaHandler
from .exceptions import MediaError, ValidationError, handle_media_errors
from .models.constants import UrlMode
from .models.media import Media
from .models.media_options import MediaFormat
from .models.resource import Resource
from .store.filesystem import FileSystemAssetStore
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPMediaResponse = dict[str, Any]
MCPAssetInfoResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def file_error(message: str, file_path: str | None = None) -> dict[str, Any]:
        """构建文件相关错误结果。"""
        details = {"file_path": file_path} if file_path else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="file",
            details=details,
        )

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> dict[str, Any]:
        """构建处理错误结果。"""
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="processing",
            details=details,
        )


logger = get_logger()

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("媒体解析服务")


# ============================================================================
# 处理器构建
# ============================================================================


@handle_media_errors("加载媒体格式")
def load_media_formats(file_path: str | Path | None = None) -> list[MediaFormat]:
    """从 JSON 文件加载媒体格式定义

    文件内容为格式定义列表，字段与 MediaFormat 一致。
    未指定路径时使用 PMH_MEDIA_FORMATS_FILE，均未设置时返回空列表。
    """
    file_path = file_path or get_config().media_formats_file
    if not file_path:
        return []

    path = Path(file_path)
    if not path.is_file():
        raise MediaError(MessageFormatter.file_not_found(path))

    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValidationError(MessageFormatter.invalid_value("媒体格式文件", path, "应为列表"))
    return [MediaFormat.model_validate(item) for item in data]


def create_handler(
    root: str | Path, url_prefix: str = "", formats_file: str | None = None
) -> MediaHandler:
    """创建基于本地目录的媒体处理器"""
    store = FileSystemAssetStore(root, url_prefix=url_prefix)
    return MediaHandler(store, media_formats=load_media_formats(formats_file))


def _as_names(value: list[str] | str | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return list(value)


def _format_media(media: Media) -> dict[str, Any]:
    """格式化解析结果为MCP响应格式"""
    result: dict[str, Any] = {
        "success": media.is_valid,
        "media_ref": media.media_ref,
        "url": media.url,
        "markup": media.markup,
        "dummy": media.dummy,
    }
    if media.media_invalid_reason is not None:
        result["invalid_reason"] = media.media_invalid_reason.value
        result["invalid_message"] = media.invalid_message
    if media.crop_dimension is not None:
        result["crop"] = media.crop_dimension.to_crop_string()
    if media.rotation is not None:
        result["rotation"] = media.rotation
    result["renditions"] = [
        {
            "name": r.name,
            "url": r.url,
            "width": r.width,
            "height": r.height,
            "mime_type": r.mime_type,
            "media_format": r.media_format.name if r.media_format else None,
            "virtual": r.virtual,
            "file_size_human": r.get_file_size_human(),
        }
        for r in media.renditions
    ]
    return result


# ============================================================================
# 🎯 核心工具
# ============================================================================


@mcp.tool()
def resolve_media(
    root: str,
    media_ref: str,
    media_formats: list[str] | str | None = None,
    mandatory: bool = False,
    width: int | None = None,
    height: int | None = None,
    auto_crop: bool = False,
    crop: str | None = None,
    rotation: int | None = None,
    url_mode: str | None = None,
    url_prefix: str = "",
) -> MCPMediaResponse:
    """解析媒体引用，返回选中的渲染版本、URL 和标记

    Args:
        root: 资源根目录
        media_ref: 资源引用（相对根目录的路径）
        media_formats: 媒体格式名称，字符串时按逗号分隔
        mandatory: 媒体格式是否全部必需
        width: 固定宽度
        height: 固定高度
        auto_crop: 按格式宽高比自动裁剪
        crop: 相对网页预览版的裁剪参数 "left,top,right,bottom"
        rotation: 旋转角度（0/90/180/270）
        url_mode: DEFAULT / NO_HOSTNAME / FULL_URL
        url_prefix: 生成 URL 的前缀

    使用场景:
        resolve_media("assets/", "photos/beach.jpg", media_formats="wide")
        resolve_media("assets/", "photos/beach.jpg", width=400, crop="0,0,400,300")
    """
    try:
        root_path = Path(root)
        if not root_path.is_dir():
            return MCPResponseBuilder.file_error(
                MessageFormatter.directory_not_found(root), root
            )

        handler = create_handler(root_path, url_prefix=url_prefix)
        media_config = get_config().media

        if crop is not None or rotation is not None:
            # 裁剪和旋转只能来自组件实例，这里用临时节点承载
            properties: dict[str, Any] = {media_config.PN_MEDIA_REF: media_ref}
            if crop is not None:
                properties[media_config.PN_MEDIA_CROP] = crop
            if rotation is not None:
                properties[media_config.PN_MEDIA_ROTATION] = rotation
            builder = handler.get(Resource(path="/mcp/request", properties=properties))
        else:
            builder = handler.get(media_ref)

        names = _as_names(media_formats)
        if names:
            if mandatory:
                builder.mandatory_media_format_names(*names)
            else:
                builder.media_format_names(*names)
        if width or height:
            builder.fixed_dimension(width or 0, height or 0)
        if url_mode:
            builder.url_mode(UrlMode(url_mode.lower()))
        builder.auto_crop(auto_crop)

        return _format_media(builder.build())

    except ValidationError as e:
        logger.warning(MessageFormatter.operation_failed("媒体解析", media_ref, e))
        return MCPResponseBuilder.validation_error(e.message)
    except ValueError as e:
        return MCPResponseBuilder.validation_error(
            MessageFormatter.validation_error("url_mode", url_mode, str(e)), "url_mode"
        )
    except MediaError as e:
        logger.error(MessageFormatter.operation_failed("媒体解析", media_ref, e))
        return MCPResponseBuilder.processing_error(e.message, "媒体解析")


@mcp.tool()
def get_asset_info(root: str, media_ref: str, url_prefix: str = "") -> MCPAssetInfoResponse:
    """获取资源的元数据和全部渲染版本

    Args:
        root: 资源根目录
        media_ref: 资源引用（相对根目录的路径）
        url_prefix: 生成 URL 的前缀

    Returns:
        dict: 资源信息，包含标题、描述和渲染版本列表
    """
    try:
        store = FileSystemAssetStore(root, url_prefix=url_prefix)
        asset = store.get_asset(media_ref)
        if asset is None:
            return MCPResponseBuilder.file_error(
                MessageFormatter.asset_not_found(media_ref), media_ref
            )

        media_config = get_config().media
        return {
            "success": True,
            "path": asset.path,
            "name": asset.name,
            "file_extension": asset.file_extension,
            "title": asset.get_metadata_value(media_config.METADATA_TITLE),
            "description": asset.get_metadata_value(media_config.METADATA_DESCRIPTION),
            "metadata": asset.metadata,
            "renditions": [
                {
                    "name": r.name,
                    "url": r.url,
                    "mime_type": r.mime_type,
                    "width": r.width,
                    "height": r.height,
                    "file_size": r.file_size,
                    "file_size_human": r.get_file_size_human(),
                    "is_original": r.is_original,
                    "is_web_rendition": r.is_web_rendition,
                    "is_thumbnail": r.is_thumbnail,
                }
                for r in asset.renditions
            ],
        }

    except MediaError as e:
        logger.error(MessageFormatter.operation_failed("获取资源信息", media_ref, e))
        return MCPResponseBuilder.processing_error(e.message, "资源信息获取")


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging()
    logger.info("启动媒体解析 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
