"""媒体解析结果模型。"""

from html import escape
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .constants import MediaInvalidReason
from .media_options import CropDimension
from .media_request import MediaRequest
from .rendition import Rendition


class MediaElement(BaseModel):
    """生成的 HTML 元素（轻量表示）"""

    model_config = ConfigDict(frozen=True)

    tag: str
    attributes: dict[str, str] = Field(default_factory=dict)
    children: tuple["MediaElement", ...] = Field(default=())
    text: str | None = Field(None, description="文本内容")

    def render(self) -> str:
        """序列化为 HTML 字符串"""
        attrs = "".join(
            f' {name}="{escape(value, quote=True)}"'
            for name, value in self.attributes.items()
        )
        if self.tag in ("img", "source"):
            return f"<{self.tag}{attrs}>"
        inner = escape(self.text or "") + "".join(child.render() for child in self.children)
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


class Media(BaseModel):
    """媒体解析结果

    解析完成后不可变，可在线程间自由共享读取。
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    media_request: MediaRequest
    media_ref: str | None = Field(None, description="实际使用的资源引用")
    asset: Any = Field(None, description="解析到的 Asset")
    rendition: Rendition | None = Field(None, description="主渲染版本")
    renditions: tuple[Rendition, ...] = Field(default=(), description="各媒体格式的渲染版本")
    crop_dimension: CropDimension | None = Field(None, description="请求的裁剪参数")
    rotation: int | None = None
    url: str | None = None
    element: MediaElement | None = None
    media_invalid_reason: MediaInvalidReason | None = None
    invalid_message: str | None = None
    dummy: bool = Field(False, description="是否为占位图")

    @computed_field
    def is_valid(self) -> bool:
        return self.media_invalid_reason is None and self.rendition is not None

    @property
    def markup(self) -> str | None:
        return self.element.render() if self.element is not None else None
