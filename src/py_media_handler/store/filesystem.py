"""文件系统资源存储。

目录结构::

    root/
      photos/beach.jpg                      # 资源本身，即 original 渲染版本
      photos/beach.jpg.renditions/          # 其它渲染版本
          web.1280.960.jpg
          thumbnail.140.100.png
      photos/beach.jpg.metadata.json        # 元数据（可选）
"""

import json
from collections.abc import Iterator
from pathlib import Path
from urllib.parse import quote

from ..config import get_config
from ..exceptions import AssetStoreError
from ..utils.file_helpers import (
    METADATA_FILE_SUFFIX,
    RENDITIONS_DIR_SUFFIX,
    find_media_files,
    get_media_mime_type,
    read_image_dimensions,
)
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .base import normalize_ref
from .models import StoreAsset, StoreRendition


logger = get_logger()


class FileSystemAssetStore:
    """基于本地目录的资源存储"""

    def __init__(self, root: str | Path, url_prefix: str = ""):
        """初始化存储

        Args:
            root: 资源根目录
            url_prefix: 渲染版本 URL 前缀，例如 /assets
        """
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix.rstrip("/")

    def get_asset(self, media_ref: str) -> StoreAsset | None:
        ref = normalize_ref(media_ref)
        if not ref:
            return None

        file_path = self._resolve(ref)
        if file_path is None or not file_path.is_file():
            logger.debug(MessageFormatter.file_not_found(ref))
            return None

        original_name = get_config().media.ORIGINAL_RENDITION
        renditions = [self._build_rendition(original_name, file_path, ref)]
        renditions_dir = file_path.with_name(file_path.name + RENDITIONS_DIR_SUFFIX)
        if renditions_dir.is_dir():
            for rendition_file in sorted(renditions_dir.iterdir()):
                if rendition_file.is_file():
                    rendition_ref = f"{ref}{RENDITIONS_DIR_SUFFIX}/{rendition_file.name}"
                    renditions.append(
                        self._build_rendition(rendition_file.name, rendition_file, rendition_ref)
                    )

        return StoreAsset(
            path=ref,
            name=file_path.name,
            metadata=self._read_metadata(file_path),
            renditions=tuple(renditions),
        )

    def list_assets(self, recursive: bool = True) -> Iterator[str]:
        """列出根目录下的全部资源引用"""
        for file_path in find_media_files(self.root, recursive=recursive):
            yield "/" + file_path.relative_to(self.root).as_posix()

    def _resolve(self, ref: str) -> Path | None:
        """把引用解析为根目录内的路径，越界时返回 None"""
        candidate = (self.root / ref.lstrip("/")).resolve()
        if not candidate.is_relative_to(self.root):
            logger.warning(MessageFormatter.invalid_value("资源引用", ref, "超出资源根目录"))
            return None
        if any(part.endswith(RENDITIONS_DIR_SUFFIX) for part in candidate.parts):
            return None
        return candidate

    def _build_rendition(self, name: str, file_path: Path, ref: str) -> StoreRendition:
        dimensions = read_image_dimensions(file_path)
        width, height = dimensions if dimensions else (None, None)
        return StoreRendition(
            name=name,
            url=f"{self.url_prefix}{quote(ref)}",
            mime_type=get_media_mime_type(file_path),
            width=width,
            height=height,
            file_size=file_path.stat().st_size,
            file_extension=file_path.suffix,
        )

    def _read_metadata(self, file_path: Path) -> dict:
        metadata_file = file_path.with_name(file_path.name + METADATA_FILE_SUFFIX)
        if not metadata_file.is_file():
            return {}
        try:
            data = json.loads(metadata_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise AssetStoreError(
                MessageFormatter.operation_failed("读取元数据", metadata_file, e),
                str(file_path),
            ) from e
        if not isinstance(data, dict):
            raise AssetStoreError(
                MessageFormatter.invalid_value("元数据", metadata_file, "必须是 JSON 对象"),
                str(file_path),
            )
        return data
