"""媒体处理器模块。

把构建完成的 MediaRequest 解析为 Media：读取实例覆盖值、解析媒体格式、
获取资源、选择渲染版本并生成标记。每次解析只使用本次调用持有的数据。
"""

from collections.abc import Iterable
from typing import Any

from ..config import get_config
from ..exceptions import ValidationError
from ..models.constants import MediaInvalidReason
from ..models.media import Media
from ..models.media_args import MediaArgs
from ..models.media_options import (
    CropDimension,
    MediaFormat,
    MediaFormatOption,
    validate_rotation,
)
from ..models.media_request import MediaRequest
from ..models.rendition import Rendition
from ..models.resource import ComponentPropertyResolver, Resource
from ..store.base import AssetStore
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .asset import Asset
from .builder import MediaBuilder
from .markup import MarkupBuilder, SimpleImageMarkupBuilder


logger = get_logger()


class MediaHandler:
    """媒体处理器

    Examples:
        >>> handler = MediaHandler(store, media_formats=[MediaFormat(name="wide", ratio=16 / 9)])
        >>> media = handler.get(resource).build()
        >>> media.is_valid, media.url
    """

    def __init__(
        self,
        store: AssetStore,
        media_formats: Iterable[MediaFormat] = (),
        markup_builder: MarkupBuilder | None = None,
        property_resolver: ComponentPropertyResolver | None = None,
    ):
        """初始化处理器

        Args:
            store: 资源存储
            media_formats: 可按名称引用的媒体格式定义
            markup_builder: 标记生成器，默认生成简单的 <img>/<picture>
            property_resolver: 组件属性解析器，默认按继承链解析
        """
        self.store = store
        self.media_formats: dict[str, MediaFormat] = {
            fmt.name: fmt for fmt in media_formats
        }
        self.markup_builder = markup_builder or SimpleImageMarkupBuilder()
        self.property_resolver = property_resolver

    # ------------------------------------------------------------------
    # 构建器入口
    # ------------------------------------------------------------------

    def get(self, subject: Resource | str | MediaRequest) -> MediaBuilder:
        """按请求主体类型创建构建器

        Raises:
            ValidationError: subject 为 None 或类型不支持
        """
        match subject:
            case Resource():
                return MediaBuilder.for_resource(subject, self, self.property_resolver)
            case MediaRequest():
                return MediaBuilder.for_request(subject, self)
            case str():
                return MediaBuilder.for_ref(subject, self)
            case None:
                raise ValidationError("媒体请求主体不能为空")
            case _:
                raise ValidationError(f"不支持的媒体请求主体类型: {type(subject).__name__}")

    def get_media_format(self, name: str) -> MediaFormat | None:
        return self.media_formats.get(name)

    # ------------------------------------------------------------------
    # 解析
    # ------------------------------------------------------------------

    def process_request(self, request: MediaRequest) -> Media:
        """解析媒体请求

        资源或渲染版本不匹配时返回无效的 Media，不抛出异常；
        资源存储抛出的异常原样传播。
        """
        args = request.media_args

        media_ref = self._read_media_ref(request)
        if not media_ref:
            return self._invalid(request, MediaInvalidReason.MEDIA_REFERENCE_MISSING)

        try:
            crop = self._read_crop(request)
        except ValidationError as e:
            return self._invalid(
                request, MediaInvalidReason.INVALID_CROP, e.message, media_ref=media_ref
            )
        try:
            rotation = self._read_rotation(request)
        except ValidationError as e:
            return self._invalid(
                request, MediaInvalidReason.INVALID_ROTATION, e.message, media_ref=media_ref
            )

        options = self._resolve_media_format_options(args)
        unknown = [option.name for option in options if option.media_format is None]
        if unknown:
            return self._invalid(
                request,
                MediaInvalidReason.INVALID_MEDIA_FORMAT,
                MessageFormatter.invalid_value("媒体格式", ", ".join(unknown)),
                media_ref=media_ref,
            )

        store_asset = self.store.get_asset(media_ref)
        if store_asset is None:
            return self._invalid(
                request,
                MediaInvalidReason.MEDIA_REFERENCE_INVALID,
                MessageFormatter.asset_not_found(media_ref),
                media_ref=media_ref,
            )

        asset = Asset(store_asset, args, crop, rotation)
        renditions = self._resolve_renditions(asset, args, options)
        if renditions is None:
            reason = (
                MediaInvalidReason.NOT_ENOUGH_MATCHING_RENDITIONS
                if args.has_mandatory_media_formats
                else MediaInvalidReason.NO_MATCHING_RENDITION
            )
            return self._invalid(
                request,
                reason,
                MessageFormatter.no_matching_rendition(
                    media_ref, ", ".join(args.media_format_names) or None
                ),
                media_ref=media_ref,
                asset=asset,
                crop=crop,
                rotation=rotation,
            )

        rendition = renditions[0]
        element = self.markup_builder.build(request, asset, rendition)
        logger.debug(
            f"媒体解析完成: {request.subject} -> {rendition.url} "
            f"({rendition.width}x{rendition.height})"
        )
        return Media(
            media_request=request,
            media_ref=media_ref,
            asset=asset,
            rendition=rendition,
            renditions=tuple(renditions),
            crop_dimension=crop,
            rotation=rotation,
            url=rendition.url,
            element=element,
        )

    # ------------------------------------------------------------------
    # 读取实例覆盖值
    # ------------------------------------------------------------------

    def _read_media_ref(self, request: MediaRequest) -> str | None:
        if request.resource is None:
            return request.media_ref
        name = request.ref_property or get_config().media.PN_MEDIA_REF
        value = request.resource.get(name)
        return str(value) if value else None

    def _read_crop(self, request: MediaRequest) -> CropDimension | None:
        if request.resource is None:
            return None
        name = request.crop_property or get_config().media.PN_MEDIA_CROP
        value = request.resource.get(name)
        if value is None or value == "":
            return None
        if isinstance(value, CropDimension):
            return value
        return CropDimension.from_crop_string(str(value))

    def _read_rotation(self, request: MediaRequest) -> int | None:
        if request.resource is None:
            return None
        name = request.rotation_property or get_config().media.PN_MEDIA_ROTATION
        return validate_rotation(request.resource.get(name))

    # ------------------------------------------------------------------
    # 渲染版本
    # ------------------------------------------------------------------

    def _resolve_media_format_options(
        self, args: MediaArgs
    ) -> tuple[MediaFormatOption, ...]:
        """把只有名称的格式选项替换为注册的格式定义，未知名称保持原样"""
        resolved = []
        for option in args.media_format_options:
            if option.media_format is None:
                media_format = self.get_media_format(option.name)
                if media_format is not None:
                    option = MediaFormatOption(
                        media_format=media_format, mandatory=option.mandatory
                    )
            resolved.append(option)
        return tuple(resolved)

    def _resolve_renditions(
        self,
        asset: Asset,
        args: MediaArgs,
        options: tuple[MediaFormatOption, ...],
    ) -> list[Rendition] | None:
        """按格式选项解析渲染版本

        必需格式必须全部匹配；没有必需格式时第一个匹配的格式胜出。
        """
        if not options:
            rendition = asset.get_default_rendition()
            return [rendition] if rendition is not None else None

        mandatory = [option for option in options if option.mandatory]
        if mandatory:
            renditions = []
            for option in mandatory:
                rendition = asset.get_rendition(args, option.media_format)
                if rendition is None:
                    logger.warning(
                        MessageFormatter.no_matching_rendition(asset.path, option.name)
                    )
                    return None
                renditions.append(rendition)
            return renditions

        for option in options:
            rendition = asset.get_rendition(args, option.media_format)
            if rendition is not None:
                return [rendition]
        logger.warning(
            MessageFormatter.no_matching_rendition(
                asset.path, ", ".join(args.media_format_names)
            )
        )
        return None

    # ------------------------------------------------------------------
    # 无效结果
    # ------------------------------------------------------------------

    def _invalid(
        self,
        request: MediaRequest,
        reason: MediaInvalidReason,
        message: str | None = None,
        **fields: Any,
    ) -> Media:
        """生成无效结果，按配置回退到占位图"""
        media_config = get_config().media
        args = request.media_args
        logger.warning(f"媒体无效 [{reason.value}]: {request.subject} {message or ''}".rstrip())

        asset = fields.pop("asset", None)
        crop = fields.pop("crop", None)
        rotation = fields.pop("rotation", None)
        media_ref = fields.pop("media_ref", None)

        if args.dummy_image and media_config.ENABLE_DUMMY_IMAGES:
            dummy_url = args.dummy_image_url or media_config.DUMMY_IMAGE_URL
            return Media(
                media_request=request,
                media_ref=media_ref,
                asset=asset,
                crop_dimension=crop,
                rotation=rotation,
                url=dummy_url,
                element=self.markup_builder.build_dummy(request, dummy_url),
                media_invalid_reason=reason,
                invalid_message=message,
                dummy=True,
            )

        return Media(
            media_request=request,
            media_ref=media_ref,
            asset=asset,
            crop_dimension=crop,
            rotation=rotation,
            media_invalid_reason=reason,
            invalid_message=message,
        )
