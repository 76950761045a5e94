"""渲染版本解析结果模型。"""

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field, computed_field

from .constants import RenditionType
from .media_options import CropDimension, Dimension, MediaFormat


class Rendition(BaseModel):
    """解析得到的渲染版本

    可能直接对应存储中的文件，也可能是裁剪/旋转/缩放后的虚拟版本。
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="来源渲染版本名称")
    url: str = Field("", description="访问 URL，空表示无效")
    file_name: str = Field(description="文件名")
    file_extension: str = Field("", description="文件扩展名")
    mime_type: str | None = Field(None, description="MIME 类型")
    rendition_type: RenditionType = Field(description="类型分类")
    width: int = Field(0, ge=0, description="宽度，非图片为 0")
    height: int = Field(0, ge=0, description="高度，非图片为 0")
    crop: CropDimension | None = Field(None, description="相对原图的裁剪矩形")
    rotation: int | None = Field(None, description="旋转角度")
    media_format: MediaFormat | None = Field(None, description="匹配的媒体格式")
    file_size: int | None = Field(None, description="来源文件大小（字节）")
    virtual: bool = Field(False, description="是否需要按参数实时转换")

    @computed_field
    def is_image(self) -> bool:
        return self.rendition_type == RenditionType.IMAGE

    @computed_field
    def is_flash(self) -> bool:
        return self.rendition_type == RenditionType.FLASH

    @computed_field
    def is_download(self) -> bool:
        return self.rendition_type == RenditionType.DOWNLOAD

    @property
    def dimension(self) -> Dimension | None:
        if self.width and self.height:
            return Dimension(width=self.width, height=self.height)
        return None

    @property
    def ratio(self) -> float | None:
        return self.width / self.height if self.width and self.height else None

    def get_file_size_human(self) -> str | None:
        """人性化显示文件大小"""
        if self.file_size is None:
            return None
        return naturalsize(self.file_size, binary=True)
