"""媒体请求参数模型。

MediaArgs 汇总一次媒体解析的全部渲染约束。构建阶段可变，
交给请求时总是复制，保证调用方模板对象的后续修改不会影响已构建的请求。
"""

from copy import deepcopy
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..exceptions import ValidationError
from .constants import DragDropSupport, MediaFileType, UrlMode
from .media_options import ImageSizes, MediaFormat, MediaFormatOption, PictureSource


class MediaArgs(BaseModel):
    """媒体解析参数"""

    model_config = ConfigDict(validate_assignment=True)

    # 格式约束
    media_format_options: tuple[MediaFormatOption, ...] = Field(
        default=(), description="可接受的媒体格式，空表示任意格式"
    )
    auto_crop: bool = Field(False, description="按格式宽高比自动裁剪")
    file_extensions: tuple[str, ...] = Field(default=(), description="允许的扩展名")

    # 尺寸约束
    fixed_width: int = Field(0, ge=0, description="固定宽度，0 表示不限")
    fixed_height: int = Field(0, ge=0, description="固定高度，0 表示不限")

    # URL 设置
    url_mode: UrlMode | None = Field(None, description="URL 构建模式")
    content_disposition_attachment: bool = Field(False, description="作为附件下载")

    # 替代文本
    alt_text: str | None = Field(None, description="替代文本覆盖值")
    force_alt_value_from_asset: bool = Field(False, description="强制使用资源元数据")
    decorative: bool = Field(False, description="装饰性图片，替代文本为空")

    # 占位图
    dummy_image: bool = Field(True, description="无效时是否显示占位图")
    dummy_image_url: str | None = Field(None, description="自定义占位图 URL")

    # 渲染版本选择
    include_asset_thumbnails: bool = Field(False, description="包含缩略图")
    include_asset_web_renditions: bool | None = Field(
        None, description="包含网页版渲染，None 时使用全局配置"
    )

    drag_drop_support: DragDropSupport = Field(DragDropSupport.AUTO)
    properties: dict[str, Any] = Field(default_factory=dict, description="自由属性")

    # 响应式策略（互斥，构建时校验）
    image_sizes: ImageSizes | None = None
    picture_sources: tuple[PictureSource, ...] | None = None

    _read_only: bool = PrivateAttr(default=False)

    @field_validator("file_extensions")
    @classmethod
    def normalize_file_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(
            dict.fromkeys(
                MediaFileType.normalize_extension(ext) for ext in v if ext
            )
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if self._read_only and not name.startswith("_"):
            raise ValidationError(f"已构建请求的 MediaArgs 为只读，不能修改 {name}")
        super().__setattr__(name, value)

    # ------------------------------------------------------------------
    # 复制
    # ------------------------------------------------------------------

    def clone(self) -> "MediaArgs":
        """深复制为独立、可修改的副本"""
        return self._copy(read_only=False)

    def read_only_copy(self) -> "MediaArgs":
        """深复制为只读副本（用于已构建的请求），properties 变为只读映射"""
        return self._copy(read_only=True)

    def _copy(self, read_only: bool) -> "MediaArgs":
        # 其余字段均为不可变值，只有 properties 需要深复制
        properties = deepcopy(dict(self.properties))
        copy = self.model_copy(update={"properties": properties})
        if read_only:
            copy.__dict__["properties"] = MappingProxyType(properties)
        copy._read_only = read_only
        return copy

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    # ------------------------------------------------------------------
    # 组合设置
    # ------------------------------------------------------------------

    def set_media_formats(self, *formats: MediaFormat, mandatory: bool = False) -> "MediaArgs":
        self.media_format_options = tuple(
            MediaFormatOption.of(fmt, mandatory) for fmt in formats
        )
        return self

    def set_media_format_names(self, *names: str, mandatory: bool = False) -> "MediaArgs":
        self.media_format_options = tuple(
            MediaFormatOption.of(name, mandatory) for name in names
        )
        return self

    def set_media_formats_mandatory(self, mandatory: bool) -> "MediaArgs":
        """统一设置所有已配置格式的必需标记"""
        self.media_format_options = tuple(
            option.model_copy(update={"mandatory": mandatory})
            for option in self.media_format_options
        )
        return self

    def set_fixed_dimension(self, width: int, height: int) -> "MediaArgs":
        self.fixed_width = width
        self.fixed_height = height
        return self

    def set_file_extensions(self, *extensions: str) -> "MediaArgs":
        self.file_extensions = tuple(extensions)
        return self

    def set_property(self, key: str, value: Any) -> "MediaArgs":
        """设置自由属性，value 为 None 时删除"""
        if self._read_only:
            raise ValidationError(f"已构建请求的 MediaArgs 为只读，不能修改属性 {key}")
        if value is None:
            self.properties.pop(key, None)
        else:
            self.properties[key] = value
        return self

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def media_format_names(self) -> list[str]:
        return [option.name for option in self.media_format_options]

    @property
    def has_mandatory_media_formats(self) -> bool:
        return any(option.mandatory for option in self.media_format_options)


def check_responsive_exclusivity(args: MediaArgs) -> None:
    """校验 image_sizes 与 picture_sources 互斥

    只在构建请求时调用，不参与单个设置操作，避免调用顺序导致误报。

    Raises:
        ValidationError: 两者同时设置
    """
    if args.image_sizes is not None and args.picture_sources:
        raise ValidationError("image_sizes 不能与 picture_sources 同时使用")
