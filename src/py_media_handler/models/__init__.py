"""数据模型包。

定义媒体解析相关的数据结构和模型。
"""

from .constants import (
    DragDropSupport,
    MediaFileType,
    MediaInvalidReason,
    RenditionType,
    UriTemplateType,
    UrlMode,
)
from .media import Media, MediaElement
from .media_args import MediaArgs, check_responsive_exclusivity
from .media_options import (
    CropDimension,
    Dimension,
    ImageSizes,
    MediaFormat,
    MediaFormatOption,
    PictureSource,
    WidthOption,
    validate_rotation,
)
from .media_request import MediaRequest
from .rendition import Rendition
from .resource import (
    ComponentDefinition,
    ComponentPropertyResolver,
    InheritingPropertyResolver,
    Resource,
)


__all__ = [
    "ComponentDefinition",
    "ComponentPropertyResolver",
    "CropDimension",
    "Dimension",
    "DragDropSupport",
    "ImageSizes",
    "InheritingPropertyResolver",
    "Media",
    "MediaArgs",
    "MediaElement",
    "MediaFileType",
    "MediaFormat",
    "MediaFormatOption",
    "MediaInvalidReason",
    "MediaRequest",
    "PictureSource",
    "Rendition",
    "RenditionType",
    "Resource",
    "UriTemplateType",
    "UrlMode",
    "WidthOption",
    "check_responsive_exclusivity",
    "validate_rotation",
]
