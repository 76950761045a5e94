"""URI 模板生成。

为动态尺寸场景提供带 {width}/{height} 占位符的 URL 模板。
"""

from pydantic import BaseModel, ConfigDict, Field

from ..models.constants import UriTemplateType
from ..models.media_args import MediaArgs
from ..models.media_options import Dimension
from .url import externalize_url


WIDTH_PLACEHOLDER = "{width}"
HEIGHT_PLACEHOLDER = "{height}"


class UriTemplate(BaseModel):
    """URI 模板"""

    model_config = ConfigDict(frozen=True)

    type: UriTemplateType
    template: str = Field(description="带占位符的 URL")
    max_width: int = Field(gt=0, description="原图宽度")
    max_height: int = Field(gt=0, description="原图高度")

    def expand(self, width: int | None = None, height: int | None = None) -> str:
        """填充占位符，缺少的一边按原图宽高比推算"""
        ratio = self.max_width / self.max_height
        if width is None and height is None:
            width, height = self.max_width, self.max_height
        elif width is None:
            width = round(height * ratio)  # type: ignore[operator]
        elif height is None:
            height = round(width / ratio)
        return self.template.replace(WIDTH_PLACEHOLDER, str(width)).replace(
            HEIGHT_PLACEHOLDER, str(height)
        )


def build_uri_template(
    template_type: UriTemplateType,
    base_url: str,
    file_name: str,
    dimension: Dimension,
    args: MediaArgs | None = None,
) -> UriTemplate:
    """生成 URI 模板

    SCALE_WIDTH 只含宽度占位符，SCALE_HEIGHT 只含高度占位符，
    CROP_CENTER 同时包含两者（按目标宽高比居中裁剪）。
    """
    match template_type:
        case UriTemplateType.SCALE_WIDTH:
            selector = f"image_file.{WIDTH_PLACEHOLDER}.0"
        case UriTemplateType.SCALE_HEIGHT:
            selector = f"image_file.0.{HEIGHT_PLACEHOLDER}"
        case UriTemplateType.CROP_CENTER:
            selector = f"image_file.{WIDTH_PLACEHOLDER}.{HEIGHT_PLACEHOLDER}.crop_center"

    template = f"{base_url}.{selector}.file/{file_name}"
    if args is not None:
        template = externalize_url(template, args.url_mode)

    return UriTemplate(
        type=template_type,
        template=template,
        max_width=dimension.width,
        max_height=dimension.height,
    )
