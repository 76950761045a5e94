"""文件工具模块。

提供文件系统资源存储使用的实用工具函数。
"""

from collections.abc import Iterator
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..models.constants import MediaFileType
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()

# 渲染版本目录和元数据文件的后缀
RENDITIONS_DIR_SUFFIX = ".renditions"
METADATA_FILE_SUFFIX = ".metadata.json"


def is_sidecar(file_path: Path) -> bool:
    """是否为渲染版本目录内文件或元数据文件"""
    if file_path.name.endswith(METADATA_FILE_SUFFIX):
        return True
    return any(part.endswith(RENDITIONS_DIR_SUFFIX) for part in file_path.parts[:-1])


def find_media_files(
    directory: str | Path,
    recursive: bool = True,
    exclude_dirs: list[str] | None = None,
) -> Iterator[Path]:
    """查找目录中的媒体资源文件（不含渲染版本和元数据文件）。

    Args:
        directory: 搜索目录
        recursive: 是否递归搜索子目录
        exclude_dirs: 要排除的目录名列表

    Yields:
        Path: 资源文件路径
    """
    directory = Path(directory)
    exclude_dirs = exclude_dirs or []

    if not directory.exists():
        logger.warning(MessageFormatter.directory_not_found(directory))
        return

    pattern = "**/*" if recursive else "*"

    for file_path in sorted(directory.glob(pattern)):
        relative = file_path.relative_to(directory)
        if (
            file_path.is_file()
            and not is_sidecar(relative)
            and not any(exclude_dir in relative.parts for exclude_dir in exclude_dirs)
        ):
            yield file_path


def read_image_dimensions(file_path: str | Path) -> tuple[int, int] | None:
    """读取位图的像素尺寸

    只读取文件头，不解码像素数据。非位图或无法识别时返回 None。
    """
    if not MediaFileType.is_raster_image(Path(file_path).suffix):
        return None
    try:
        with Image.open(file_path) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        logger.debug(MessageFormatter.operation_failed("读取图片尺寸", file_path, e))
        return None


def get_media_mime_type(file_path: str | Path) -> str:
    """获取文件的 MIME 类型，位图优先使用 Pillow 识别的实际格式"""
    path = Path(file_path)
    if MediaFileType.is_raster_image(path.suffix):
        try:
            with Image.open(path) as img:
                if img.format:
                    return Image.MIME.get(img.format, f"image/{img.format.lower()}")
        except (UnidentifiedImageError, OSError) as e:
            logger.debug(MessageFormatter.operation_failed("获取 MIME 类型", path, e))
    return MediaFileType.get_mime_type(path.suffix)
