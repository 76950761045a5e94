"""资源存储数据模型。

StoreAsset / StoreRendition 是外部资源存储提供的只读视图，每次请求重新构建。
"""

from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..config import get_config
from ..models.constants import MediaFileType
from ..models.media_options import Dimension


class StoreRendition(BaseModel):
    """存储中的一个渲染版本（二进制文件）"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="渲染版本名称，如 original / web.1280.1280.jpg")
    url: str | None = Field(None, description="二进制访问 URL，空表示不可用")
    mime_type: str | None = Field(None, description="MIME 类型")
    width: int | None = Field(None, ge=0, description="宽度（图片）")
    height: int | None = Field(None, ge=0, description="高度（图片）")
    file_size: int | None = Field(None, ge=0, description="文件大小（字节）")
    file_extension: str = Field("", description="文件扩展名")

    @model_validator(mode="after")
    def derive_file_extension(self) -> "StoreRendition":
        if not self.file_extension:
            object.__setattr__(
                self, "file_extension", MediaFileType.get_extension(self.name)
            )
        else:
            object.__setattr__(
                self,
                "file_extension",
                MediaFileType.normalize_extension(self.file_extension),
            )
        return self

    @computed_field
    def dimension(self) -> Dimension | None:
        """像素尺寸，未知时为 None"""
        if self.width and self.height:
            return Dimension(width=self.width, height=self.height)
        return None

    @property
    def is_original(self) -> bool:
        return self.name == get_config().media.ORIGINAL_RENDITION

    @property
    def is_web_rendition(self) -> bool:
        return self.name.startswith(get_config().media.WEB_RENDITION_PREFIX)

    @property
    def is_thumbnail(self) -> bool:
        return self.name.startswith(get_config().media.THUMBNAIL_RENDITION_PREFIX)

    def get_file_size_human(self) -> str | None:
        """人性化显示文件大小"""
        if self.file_size is None:
            return None
        return naturalsize(self.file_size, binary=True)


class StoreAsset(BaseModel):
    """存储中的一个资源（逻辑文件及其全部渲染版本）"""

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1, description="资源路径")
    name: str = Field(min_length=1, description="技术名称（文件名）")
    metadata: dict[str, Any] = Field(default_factory=dict, description="元数据")
    renditions: tuple[StoreRendition, ...] = Field(default=())

    @property
    def file_extension(self) -> str:
        return MediaFileType.get_extension(self.name)

    @property
    def original(self) -> StoreRendition | None:
        """原始渲染版本"""
        return next((r for r in self.renditions if r.is_original), None)

    @property
    def web_rendition(self) -> StoreRendition | None:
        """网页优化预览版（尺寸最大的一个）"""
        candidates = [r for r in self.renditions if r.is_web_rendition and r.dimension]
        if not candidates:
            return None
        return max(candidates, key=lambda r: (r.width or 0) * (r.height or 0))

    def get_rendition(self, name: str) -> StoreRendition | None:
        return next((r for r in self.renditions if r.name == name), None)

    def get_metadata_value(self, name: str) -> Any:
        return self.metadata.get(name)
