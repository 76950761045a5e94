"""媒体处理异常模块。

定义统一的异常类和错误处理装饰器。
资源解析未命中不属于异常，统一以 None 或无效 Media 表示。
"""

from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from pydantic import ValidationError as PydanticValidationError

from .utils.logging_helpers import get_logger


logger = get_logger()
T = TypeVar("T")


class MediaError(Exception):
    """媒体处理错误基类"""

    def __init__(self, message: str, media_ref: str | None = None):
        super().__init__(message)
        self.message = message
        self.media_ref = media_ref


class ValidationError(MediaError):
    """参数验证错误 - 统一的验证错误类型"""

    pass


class UnsupportedAssetTypeError(ValidationError):
    """资源类型不支持当前操作（例如为矢量图生成 URI 模板）"""

    pass


class MissingDimensionError(ValidationError):
    """原始文件缺少尺寸信息"""

    pass


class AssetStoreError(MediaError):
    """资源存储读取错误"""

    pass


def handle_media_errors(operation_name: str = "媒体处理"):
    """统一的媒体处理异常处理装饰器

    只在对外边界（MCP 工具）使用，核心逻辑中的异常原样向上传播。

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except MediaError as e:
                logger.warning(f"{operation_name} - {e.message}")
                raise
            except PydanticValidationError as e:
                logger.warning(f"{operation_name} - 参数错误: {e}")
                raise ValidationError(f"参数错误: {e}") from e
            except OSError as e:
                logger.error(f"{operation_name} - 文件操作失败: {e}")
                raise AssetStoreError(f"文件操作失败: {e}") from e
            except (ValueError, TypeError) as e:
                logger.error(f"{operation_name} - 参数错误: {e}")
                raise ValidationError(f"参数错误: {e}") from e

        return wrapper

    return decorator
