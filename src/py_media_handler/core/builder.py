"""媒体请求构建器模块。

调用方唯一的可变操作入口：合并显式参数、组件继承配置和请求级覆盖，
构建不可变的 MediaRequest 并交给处理器解析。
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..exceptions import ValidationError
from ..models.constants import DragDropSupport, UrlMode
from ..models.media import Media, MediaElement
from ..models.media_args import MediaArgs, check_responsive_exclusivity
from ..models.media_options import (
    ImageSizes,
    MediaFormat,
    MediaFormatOption,
    PictureSource,
    WidthOption,
)
from ..models.media_request import MediaRequest
from ..models.resource import (
    ComponentPropertyResolver,
    InheritingPropertyResolver,
    Resource,
)
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import format_validation_error


if TYPE_CHECKING:
    from .handler import MediaHandler


logger = get_logger()


def reconcile_media_format_options(
    names: Sequence[str] | None, mandatory_flags: Sequence[bool] | None
) -> tuple[MediaFormatOption, ...]:
    """由组件配置的格式名和必需标记生成格式选项

    - 标记列表只有一个元素时，作用于全部格式（向后兼容）
    - 多个元素时按下标对齐，超出标记列表长度的格式默认不必需
    - 没有标记列表时全部不必需
    """
    if not names:
        return ()

    options = []
    for index, name in enumerate(names):
        mandatory = False
        if mandatory_flags:
            if len(mandatory_flags) == 1:
                mandatory = bool(mandatory_flags[0])
            elif index < len(mandatory_flags):
                mandatory = bool(mandatory_flags[index])
        options.append(MediaFormatOption.of(name, mandatory))
    return tuple(options)


def _as_list(value: Any) -> list[Any] | None:
    """组件属性可能是单值也可能是列表"""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _require(value: Any, field: str) -> Any:
    if value is None:
        raise ValidationError(format_validation_error(field, value, "非空值"))
    return value


class MediaBuilder:
    """媒体请求构建器

    所有设置方法返回构建器本身，支持链式调用。
    构建器不是线程安全的，不能在并发调用方之间共享。

    Examples:
        >>> media = (
        ...     handler.get("/content/dam/sample.jpg")
        ...     .media_format_names("wide")
        ...     .alt_text("Sample")
        ...     .build()
        ... )
    """

    def __init__(
        self,
        handler: "MediaHandler",
        *,
        resource: Resource | None = None,
        media_ref: str | None = None,
        media_args: MediaArgs | None = None,
        ref_property: str | None = None,
        crop_property: str | None = None,
        rotation_property: str | None = None,
    ):
        self._handler = handler
        self._resource = resource
        self._media_ref = media_ref
        self._media_args = media_args if media_args is not None else MediaArgs()
        self._ref_property = ref_property
        self._crop_property = crop_property
        self._rotation_property = rotation_property
        self._picture_sources: list[PictureSource] = []

    # ------------------------------------------------------------------
    # 三种创建方式
    # ------------------------------------------------------------------

    @classmethod
    def for_resource(
        cls,
        resource: Resource,
        handler: "MediaHandler",
        property_resolver: ComponentPropertyResolver | None = None,
    ) -> "MediaBuilder":
        """基于内容节点创建，立即读取组件继承配置"""
        _require(resource, "resource")
        resolver = property_resolver or InheritingPropertyResolver()
        media_config = get_config().media

        args = MediaArgs()
        args.auto_crop = _to_bool(
            resolver.get(resource, media_config.PN_COMPONENT_MEDIA_AUTOCROP, False)
        )

        names = _as_list(resolver.get(resource, media_config.PN_COMPONENT_MEDIA_FORMATS))
        flags = _as_list(
            resolver.get(resource, media_config.PN_COMPONENT_MEDIA_FORMATS_MANDATORY)
        )
        if names:
            args.media_format_options = reconcile_media_format_options(
                [str(name) for name in names],
                [_to_bool(flag) for flag in flags] if flags is not None else None,
            )

        logger.debug(
            f"从组件配置创建构建器: {resource.path} 格式={args.media_format_names}"
        )
        return cls(handler, resource=resource, media_args=args)

    @classmethod
    def for_ref(cls, media_ref: str, handler: "MediaHandler") -> "MediaBuilder":
        """基于原始资源引用创建，不应用任何组件默认值"""
        _require(media_ref, "media_ref")
        return cls(handler, media_ref=media_ref)

    @classmethod
    def for_request(
        cls, media_request: MediaRequest, handler: "MediaHandler"
    ) -> "MediaBuilder":
        """基于已构建的请求创建，参数深复制，原请求不受影响"""
        _require(media_request, "media_request")
        return cls(
            handler,
            resource=media_request.resource,
            media_ref=media_request.media_ref,
            media_args=media_request.media_args.clone(),
            ref_property=media_request.ref_property,
            crop_property=media_request.crop_property,
            rotation_property=media_request.rotation_property,
        )

    # ------------------------------------------------------------------
    # 参数设置
    # ------------------------------------------------------------------

    def _set(self, field: str, value: Any) -> "MediaBuilder":
        """写入参数字段，把 pydantic 校验错误转换为 ValidationError"""
        try:
            setattr(self._media_args, field, value)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_error(field, value, str(e))) from e
        return self

    def args(self, value: MediaArgs) -> "MediaBuilder":
        """整体替换参数（复制后保存，调用方对象不受后续修改影响）"""
        _require(value, "media_args")
        self._media_args = value.clone()
        return self

    @property
    def media_args(self) -> MediaArgs:
        return self._media_args

    def media_formats(self, *values: MediaFormat) -> "MediaBuilder":
        self._media_args.set_media_formats(*(_require(v, "media_format") for v in values))
        return self

    def mandatory_media_formats(self, *values: MediaFormat) -> "MediaBuilder":
        self._media_args.set_media_formats(
            *(_require(v, "media_format") for v in values), mandatory=True
        )
        return self

    def media_format(self, value: MediaFormat) -> "MediaBuilder":
        return self.media_formats(value)

    def media_formats_mandatory(self, value: bool) -> "MediaBuilder":
        self._media_args.set_media_formats_mandatory(
            _to_bool(_require(value, "media_formats_mandatory"))
        )
        return self

    def media_format_names(self, *values: str) -> "MediaBuilder":
        self._media_args.set_media_format_names(
            *(_require(v, "media_format_name") for v in values)
        )
        return self

    def mandatory_media_format_names(self, *values: str) -> "MediaBuilder":
        self._media_args.set_media_format_names(
            *(_require(v, "media_format_name") for v in values), mandatory=True
        )
        return self

    def media_format_name(self, value: str) -> "MediaBuilder":
        return self.media_format_names(value)

    def media_format_options(self, *values: MediaFormatOption) -> "MediaBuilder":
        return self._set(
            "media_format_options",
            tuple(_require(v, "media_format_option") for v in values),
        )

    def auto_crop(self, value: bool) -> "MediaBuilder":
        return self._set("auto_crop", value)

    def file_extensions(self, *values: str) -> "MediaBuilder":
        return self._set(
            "file_extensions", tuple(_require(v, "file_extension") for v in values)
        )

    def file_extension(self, value: str) -> "MediaBuilder":
        return self.file_extensions(value)

    def url_mode(self, value: UrlMode) -> "MediaBuilder":
        return self._set("url_mode", _require(value, "url_mode"))

    def fixed_width(self, value: int) -> "MediaBuilder":
        return self._set("fixed_width", value)

    def fixed_height(self, value: int) -> "MediaBuilder":
        return self._set("fixed_height", value)

    def fixed_dimension(self, width: int, height: int) -> "MediaBuilder":
        """同时设置固定宽高，任一值无效时两者都不修改"""
        try:
            checked = MediaArgs(fixed_width=width, fixed_height=height)
        except PydanticValidationError as e:
            raise ValidationError(
                format_validation_error("fixed_dimension", (width, height), str(e))
            ) from e
        self._media_args.set_fixed_dimension(checked.fixed_width, checked.fixed_height)
        return self

    def content_disposition_attachment(self, value: bool) -> "MediaBuilder":
        return self._set("content_disposition_attachment", value)

    def alt_text(self, value: str) -> "MediaBuilder":
        return self._set("alt_text", _require(value, "alt_text"))

    def force_alt_value_from_asset(self, value: bool) -> "MediaBuilder":
        return self._set("force_alt_value_from_asset", value)

    def decorative(self, value: bool) -> "MediaBuilder":
        return self._set("decorative", value)

    def dummy_image(self, value: bool) -> "MediaBuilder":
        return self._set("dummy_image", value)

    def dummy_image_url(self, value: str) -> "MediaBuilder":
        return self._set("dummy_image_url", _require(value, "dummy_image_url"))

    def include_asset_thumbnails(self, value: bool) -> "MediaBuilder":
        return self._set("include_asset_thumbnails", value)

    def include_asset_web_renditions(self, value: bool) -> "MediaBuilder":
        return self._set("include_asset_web_renditions", value)

    def drag_drop_support(self, value: DragDropSupport) -> "MediaBuilder":
        return self._set("drag_drop_support", _require(value, "drag_drop_support"))

    def property(self, key: str, value: Any) -> "MediaBuilder":
        self._media_args.set_property(_require(key, "property_key"), value)
        return self

    def image_sizes(self, sizes: str, *widths: int | WidthOption) -> "MediaBuilder":
        try:
            value = ImageSizes.of_widths(_require(sizes, "sizes"), *widths)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_error("image_sizes", widths, str(e))) from e
        return self._set("image_sizes", value)

    def picture_source(
        self,
        media_format: MediaFormat,
        *widths: int | WidthOption,
        media: str | None = None,
    ) -> "MediaBuilder":
        """追加一个 <picture> source，按调用顺序保存，构建时才写入参数"""
        _require(media_format, "media_format")
        try:
            source = PictureSource.of_widths(media_format, *widths, media=media)
        except PydanticValidationError as e:
            raise ValidationError(
                format_validation_error("picture_source", widths, str(e))
            ) from e
        self._picture_sources.append(source)
        return self

    def ref_property(self, value: str) -> "MediaBuilder":
        self._ref_property = _require(value, "ref_property")
        return self

    def crop_property(self, value: str) -> "MediaBuilder":
        self._crop_property = _require(value, "crop_property")
        return self

    def rotation_property(self, value: str) -> "MediaBuilder":
        self._rotation_property = _require(value, "rotation_property")
        return self

    # ------------------------------------------------------------------
    # 构建
    # ------------------------------------------------------------------

    def build_request(self) -> MediaRequest:
        """生成不可变的请求（不执行解析）

        Raises:
            ValidationError: image_sizes 与 picture_sources 同时设置
        """
        if self._picture_sources:
            self._set("picture_sources", tuple(self._picture_sources))
        check_responsive_exclusivity(self._media_args)

        return MediaRequest(
            resource=self._resource,
            media_ref=self._media_ref,
            media_args=self._media_args,
            ref_property=self._ref_property,
            crop_property=self._crop_property,
            rotation_property=self._rotation_property,
        )

    def build(self) -> Media:
        """构建请求并交给处理器解析"""
        return self._handler.process_request(self.build_request())

    def build_markup(self) -> str | None:
        return self.build().markup

    def build_element(self) -> MediaElement | None:
        return self.build().element

    def build_url(self) -> str | None:
        return self.build().url
