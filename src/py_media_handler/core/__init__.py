"""核心模块包。

媒体解析核心：请求构建、资源封装、渲染版本选择和标记生成。
"""

from .asset import Asset
from .builder import MediaBuilder, reconcile_media_format_options
from .cropping import get_crop_dimension_for_original, rescale_crop_dimension
from .handler import MediaHandler
from .markup import MarkupBuilder, SimpleImageMarkupBuilder
from .rendition import RenditionResolver
from .uri_template import UriTemplate, build_uri_template


__all__ = [
    "Asset",
    "MarkupBuilder",
    "MediaBuilder",
    "MediaHandler",
    "RenditionResolver",
    "SimpleImageMarkupBuilder",
    "UriTemplate",
    "build_uri_template",
    "get_crop_dimension_for_original",
    "reconcile_media_format_options",
    "rescale_crop_dimension",
]
