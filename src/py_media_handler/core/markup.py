"""媒体标记生成。

生成的元素只用于展示解析结果，完整的 HTML 组件化渲染由外部负责。
"""

from typing import Protocol

from ..models.constants import DragDropSupport
from ..models.media import MediaElement
from ..models.media_args import MediaArgs
from ..models.media_options import MediaFormat, WidthOption
from ..models.media_request import MediaRequest
from ..models.rendition import Rendition
from ..utils.logging_helpers import get_logger
from .asset import Asset


logger = get_logger()

DRAG_DROP_CSS_CLASS = "media-dd"


class MarkupBuilder(Protocol):
    """标记生成器协议"""

    def build(
        self, request: MediaRequest, asset: Asset, rendition: Rendition
    ) -> MediaElement | None: ...

    def build_dummy(self, request: MediaRequest, url: str) -> MediaElement: ...


class SimpleImageMarkupBuilder:
    """默认标记生成器

    图片生成 <img>（可带 srcset/sizes）或 <picture>，
    Flash 生成 <object>，其它文件生成下载链接。
    """

    def build(
        self, request: MediaRequest, asset: Asset, rendition: Rendition
    ) -> MediaElement | None:
        args = request.media_args
        if rendition.is_flash:
            return MediaElement(
                tag="object",
                attributes={
                    "type": rendition.mime_type or "application/x-shockwave-flash",
                    "data": rendition.url,
                    **self._dimension_attributes(rendition),
                },
            )
        if not rendition.is_image:
            return MediaElement(
                tag="a",
                attributes={"href": rendition.url},
                text=asset.title,
            )

        img = self._build_img(request, asset, rendition)
        if args.picture_sources:
            sources = self._build_picture_sources(asset, args)
            return MediaElement(tag="picture", children=(*sources, img))
        return img

    def build_dummy(self, request: MediaRequest, url: str) -> MediaElement:
        args = request.media_args
        attributes = {"src": url, "alt": ""}
        if args.fixed_width:
            attributes["width"] = str(args.fixed_width)
        if args.fixed_height:
            attributes["height"] = str(args.fixed_height)
        attributes["class"] = "media-dummy"
        return MediaElement(tag="img", attributes=attributes)

    # ------------------------------------------------------------------

    def _build_img(
        self, request: MediaRequest, asset: Asset, rendition: Rendition
    ) -> MediaElement:
        args = request.media_args
        attributes = {
            "src": rendition.url,
            "alt": asset.alt_text,
            **self._dimension_attributes(rendition),
        }

        if args.image_sizes is not None:
            srcset = self._build_srcset(
                asset, args, rendition.media_format, args.image_sizes.width_options
            )
            if srcset:
                attributes["srcset"] = srcset
                attributes["sizes"] = args.image_sizes.sizes

        if self._drag_drop_enabled(request):
            attributes["class"] = DRAG_DROP_CSS_CLASS

        return MediaElement(tag="img", attributes=attributes)

    def _build_picture_sources(
        self, asset: Asset, args: MediaArgs
    ) -> list[MediaElement]:
        sources = []
        for picture_source in args.picture_sources or ():
            srcset = self._build_srcset(
                asset, args, picture_source.media_format, picture_source.width_options
            )
            if not srcset:
                logger.debug(
                    f"picture source 没有可用的渲染版本: {asset.path} "
                    f"[{picture_source.media_format.name}]"
                )
                continue
            attributes = {"srcset": srcset}
            if picture_source.media:
                attributes["media"] = picture_source.media
            sources.append(MediaElement(tag="source", attributes=attributes))
        return sources

    def _build_srcset(
        self,
        asset: Asset,
        args: MediaArgs,
        media_format: MediaFormat | None,
        width_options: tuple[WidthOption, ...],
    ) -> str | None:
        """按宽度逐个解析渲染版本，缺少必需宽度时返回 None"""
        entries = []
        for option in width_options:
            width_args = args.clone()
            width_args.image_sizes = None
            width_args.picture_sources = None
            width_args.set_fixed_dimension(option.width, 0)
            rendition = asset.get_image_rendition(width_args, media_format)
            if rendition is None:
                if option.mandatory:
                    logger.warning(f"缺少必需的响应式宽度 {option.width}: {asset.path}")
                    return None
                continue
            entries.append(f"{rendition.url} {option.descriptor}")
        return ", ".join(entries) or None

    @staticmethod
    def _dimension_attributes(rendition: Rendition) -> dict[str, str]:
        if not rendition.width or not rendition.height:
            return {}
        return {"width": str(rendition.width), "height": str(rendition.height)}

    @staticmethod
    def _drag_drop_enabled(request: MediaRequest) -> bool:
        match request.media_args.drag_drop_support:
            case DragDropSupport.ALWAYS:
                return True
            case DragDropSupport.NEVER:
                return False
            case _:
                return request.resource is not None
