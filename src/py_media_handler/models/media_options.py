"""媒体配置值对象。

定义媒体格式、响应式图片和裁剪/旋转相关的不可变值类型。
"""

from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..exceptions import ValidationError
from .constants import MediaFileType


VALID_ROTATIONS: Final[tuple[int, ...]] = (0, 90, 180, 270)


class MediaFormat(BaseModel):
    """媒体格式定义（输出尺寸/宽高比约束）"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="格式名称")
    label: str | None = Field(None, description="显示名称")
    width: int = Field(0, ge=0, description="固定宽度，0 表示不限")
    height: int = Field(0, ge=0, description="固定高度，0 表示不限")
    min_width: int = Field(0, ge=0, description="最小宽度")
    min_height: int = Field(0, ge=0, description="最小高度")
    ratio: float | None = Field(None, gt=0, description="宽高比")
    extensions: tuple[str, ...] = Field(default=(), description="允许的文件扩展名")
    download: bool = Field(False, description="是否为下载格式")

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(MediaFileType.normalize_extension(ext) for ext in v if ext)

    @property
    def effective_ratio(self) -> float | None:
        """显式宽高比，否则由固定宽高推导"""
        if self.ratio:
            return self.ratio
        if self.width and self.height:
            return self.width / self.height
        return None

    @property
    def has_size_constraints(self) -> bool:
        return bool(
            self.width
            or self.height
            or self.min_width
            or self.min_height
            or self.effective_ratio
        )


class MediaFormatOption(BaseModel):
    """可接受的媒体格式及其是否必需"""

    model_config = ConfigDict(frozen=True)

    media_format_name: str | None = None
    media_format: MediaFormat | None = None
    mandatory: bool = False

    @model_validator(mode="after")
    def validate_format_source(self) -> "MediaFormatOption":
        if (self.media_format is None) == (self.media_format_name is None):
            raise ValueError("必须且只能指定 media_format 或 media_format_name 之一")
        return self

    @property
    def name(self) -> str:
        if self.media_format is not None:
            return self.media_format.name
        return self.media_format_name or ""

    @classmethod
    def of(cls, value: "MediaFormat | str", mandatory: bool = False) -> "MediaFormatOption":
        """按格式对象或格式名创建"""
        if isinstance(value, MediaFormat):
            return cls(media_format=value, mandatory=mandatory)
        return cls(media_format_name=value, mandatory=mandatory)


class WidthOption(BaseModel):
    """响应式宽度选项"""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0, description="宽度（像素）")
    density: str | None = Field(None, description="像素密度描述，如 2x")
    mandatory: bool = Field(True, description="缺失时是否视为失败")

    @property
    def descriptor(self) -> str:
        """srcset 中使用的描述符"""
        return self.density or f"{self.width}w"


def _to_width_options(widths: "tuple[int | WidthOption, ...]") -> tuple[WidthOption, ...]:
    return tuple(w if isinstance(w, WidthOption) else WidthOption(width=w) for w in widths)


class ImageSizes(BaseModel):
    """<img sizes/srcset> 响应式策略"""

    model_config = ConfigDict(frozen=True)

    sizes: str = Field(min_length=1, description="sizes 属性值")
    width_options: tuple[WidthOption, ...] = Field(min_length=1)

    @classmethod
    def of_widths(cls, sizes: str, *widths: "int | WidthOption") -> "ImageSizes":
        return cls(sizes=sizes, width_options=_to_width_options(widths))


class PictureSource(BaseModel):
    """<picture> 中的一个 <source> 定义"""

    model_config = ConfigDict(frozen=True)

    media_format: MediaFormat
    media: str | None = Field(None, description="媒体查询条件")
    width_options: tuple[WidthOption, ...] = Field(min_length=1)

    @classmethod
    def of_widths(
        cls, media_format: MediaFormat, *widths: "int | WidthOption", media: str | None = None
    ) -> "PictureSource":
        return cls(
            media_format=media_format, media=media, width_options=_to_width_options(widths)
        )


class Dimension(BaseModel):
    """像素尺寸"""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @property
    def ratio(self) -> float | None:
        return self.width / self.height if self.height > 0 else None


class CropDimension(BaseModel):
    """裁剪矩形

    坐标总是相对于某个具体的图像表示（网页预览版或原图）。
    """

    model_config = ConfigDict(frozen=True)

    left: int = Field(ge=0)
    top: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    auto_crop: bool = Field(False, description="是否由自动裁剪计算得到")

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def to_crop_string(self) -> str:
        """序列化为 left,top,right,bottom"""
        return f"{self.left},{self.top},{self.right},{self.bottom}"

    @classmethod
    def from_crop_string(cls, value: str) -> "CropDimension":
        """解析 left,top,right,bottom 格式的裁剪字符串

        Raises:
            ValidationError: 格式错误或矩形为空
        """
        parts = [p.strip() for p in str(value).split(",")]
        if len(parts) != 4:
            raise ValidationError(f"无效的裁剪字符串: {value!r}")
        try:
            left, top, right, bottom = (int(p) for p in parts)
        except ValueError as e:
            raise ValidationError(f"无效的裁剪字符串: {value!r}") from e
        if left < 0 or top < 0 or right <= left or bottom <= top:
            raise ValidationError(f"无效的裁剪区域: {value!r}")
        return cls(left=left, top=top, width=right - left, height=bottom - top)


def validate_rotation(value: object) -> int | None:
    """校验旋转角度

    只接受 0/90/180/270，其它值直接拒绝，不做取模归一化。

    Raises:
        ValidationError: 角度无效
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"无效的旋转角度: {value!r}")
    try:
        rotation = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as e:
        raise ValidationError(f"无效的旋转角度: {value!r}") from e
    if rotation != value and not isinstance(value, str):
        # 拒绝 90.5 之类的浮点值
        raise ValidationError(f"无效的旋转角度: {value!r}")
    if rotation not in VALID_ROTATIONS:
        raise ValidationError(
            f"无效的旋转角度: {value!r}，支持: {', '.join(map(str, VALID_ROTATIONS))}"
        )
    return rotation
