"""媒体请求模型。"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .media_args import MediaArgs
from .resource import Resource


class MediaRequest(BaseModel):
    """构建完成的不可变媒体请求

    resource 与 media_ref 必须且只能设置其一；media_args 保存为只读深复制。
    """

    model_config = ConfigDict(frozen=True)

    resource: Resource | None = Field(None, description="已解析的内容节点")
    media_ref: str | None = Field(None, description="原始资源引用")
    media_args: MediaArgs = Field(default_factory=MediaArgs)
    ref_property: str | None = Field(None, description="读取资源引用的属性名")
    crop_property: str | None = Field(None, description="读取裁剪参数的属性名")
    rotation_property: str | None = Field(None, description="读取旋转参数的属性名")

    @field_validator("media_args")
    @classmethod
    def snapshot_media_args(cls, v: MediaArgs) -> MediaArgs:
        return v.read_only_copy()

    @model_validator(mode="after")
    def validate_subject(self) -> "MediaRequest":
        if (self.resource is None) == (self.media_ref is None):
            raise ValueError("resource 与 media_ref 必须且只能指定其一")
        return self

    @property
    def subject(self) -> str:
        """用于日志的请求主体描述"""
        return self.resource.path if self.resource is not None else str(self.media_ref)
