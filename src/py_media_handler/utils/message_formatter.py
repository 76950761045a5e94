"""消息格式化工具模块。

提供统一的错误消息、日志消息格式化功能。
"""

from pathlib import Path
from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def directory_not_found(directory: str | Path) -> str:
        """目录不存在错误消息"""
        return f"目录不存在: {directory}"

    @staticmethod
    def asset_not_found(media_ref: str) -> str:
        """资源不存在消息"""
        return f"找不到媒体资源: {media_ref}"

    @staticmethod
    def no_matching_rendition(media_ref: str, constraints: str | None = None) -> str:
        """没有匹配的渲染版本"""
        msg = f"没有匹配的渲染版本: {media_ref}"
        if constraints:
            msg += f" ({constraints})"
        return msg

    @staticmethod
    def invalid_value(field: str, value: Any, reason: str | None = None) -> str:
        """持久化值无效消息"""
        msg = f"无效的 {field}: {value!r}"
        if reason:
            msg += f" - {reason}"
        return msg

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"参数验证失败 - {field}: {value}"
        if reason:
            msg += f" ({reason})"
        return msg


def format_validation_error(field: str, value: Any, expected: str | None = None) -> str:
    """格式化验证错误消息"""
    reason = f"期望: {expected}" if expected else None
    return MessageFormatter.validation_error(field, value, reason)
