"""媒体资源封装。

Asset 把存储资源与本次请求的裁剪/旋转/默认参数组合在一起，
提供标题、替代文本和渲染版本查询。
"""

from typing import Any

from ..config import get_config
from ..exceptions import MissingDimensionError, UnsupportedAssetTypeError
from ..models.constants import MediaFileType, UriTemplateType
from ..models.media_args import MediaArgs
from ..models.media_options import CropDimension, MediaFormat
from ..models.rendition import Rendition
from ..store.models import StoreAsset
from ..utils.logging_helpers import get_logger
from . import cropping
from .rendition import RenditionResolver
from .uri_template import UriTemplate, build_uri_template


logger = get_logger()


class Asset:
    """带请求上下文的媒体资源

    裁剪参数在构造时换算到原图并只保存换算后的值，
    之后的每次渲染版本查询都复用它，不会重复换算。
    """

    def __init__(
        self,
        store_asset: StoreAsset,
        default_args: MediaArgs,
        crop: CropDimension | None = None,
        rotation: int | None = None,
    ):
        """初始化资源

        Args:
            store_asset: 存储资源
            default_args: 请求的默认参数
            crop: 相对网页预览版的裁剪矩形
            rotation: 已校验的旋转角度
        """
        self._store_asset = store_asset
        self._default_args = default_args
        self._crop = cropping.get_crop_dimension_for_original(store_asset, crop)
        self._rotation = rotation
        self._resolver = RenditionResolver(store_asset, self._crop, self._rotation)

    # ------------------------------------------------------------------
    # 基本信息
    # ------------------------------------------------------------------

    @property
    def store_asset(self) -> StoreAsset:
        return self._store_asset

    @property
    def path(self) -> str:
        return self._store_asset.path

    @property
    def name(self) -> str:
        return self._store_asset.name

    @property
    def crop_dimension(self) -> CropDimension | None:
        """相对原图的裁剪矩形"""
        return self._crop

    @property
    def rotation(self) -> int | None:
        return self._rotation

    @property
    def properties(self) -> dict[str, Any]:
        """元数据的只读副本"""
        return dict(self._store_asset.metadata)

    @property
    def title(self) -> str:
        """标题，为空时回退到技术名称"""
        title = self._get_property_aware_of_array(get_config().media.METADATA_TITLE)
        return title or self._store_asset.name

    @property
    def description(self) -> str | None:
        return self._get_property_aware_of_array(
            get_config().media.METADATA_DESCRIPTION
        )

    @property
    def alt_text(self) -> str:
        """替代文本

        装饰性图片为空字符串；未强制使用资源元数据且存在覆盖值时使用覆盖值；
        否则依次回退到描述、标题、技术名称。
        """
        args = self._default_args
        if args.decorative:
            return ""
        if not args.force_alt_value_from_asset and args.alt_text:
            return args.alt_text
        return self.description or self.title

    def _get_property_aware_of_array(self, name: str) -> str | None:
        """读取字符串元数据，多值时取第一个元素，空白视为不存在"""
        value = self._store_asset.get_metadata_value(name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    # ------------------------------------------------------------------
    # 渲染版本
    # ------------------------------------------------------------------

    def get_default_rendition(self) -> Rendition | None:
        return self.get_rendition(self._default_args)

    def get_rendition(
        self, args: MediaArgs, media_format: MediaFormat | None = None
    ) -> Rendition | None:
        """按参数选择渲染版本

        选中但 URL 为空的渲染版本视为无效，与未选中一样返回 None。
        """
        rendition = self._resolver.resolve(args, media_format)
        if rendition is None:
            return None
        if not rendition.url:
            logger.debug(f"渲染版本 URL 为空，视为无效: {self.path} [{rendition.name}]")
            return None
        return rendition

    def get_image_rendition(
        self, args: MediaArgs, media_format: MediaFormat | None = None
    ) -> Rendition | None:
        rendition = self.get_rendition(args, media_format)
        return rendition if rendition is not None and rendition.is_image else None

    def get_flash_rendition(
        self, args: MediaArgs, media_format: MediaFormat | None = None
    ) -> Rendition | None:
        rendition = self.get_rendition(args, media_format)
        return rendition if rendition is not None and rendition.is_flash else None

    def get_download_rendition(
        self, args: MediaArgs, media_format: MediaFormat | None = None
    ) -> Rendition | None:
        rendition = self.get_rendition(args, media_format)
        return rendition if rendition is not None and rendition.is_download else None

    # ------------------------------------------------------------------
    # URI 模板
    # ------------------------------------------------------------------

    def get_uri_template(self, template_type: UriTemplateType) -> UriTemplate:
        """生成基于原图的 URI 模板

        Raises:
            UnsupportedAssetTypeError: 非位图或矢量图
            MissingDimensionError: 原图缺少尺寸信息
        """
        extension = self._store_asset.file_extension
        if not MediaFileType.is_image(extension) or MediaFileType.is_vector_image(extension):
            raise UnsupportedAssetTypeError(
                f"无法为该类型的资源生成 URI 模板: {self.path}", self.path
            )

        original = self._store_asset.original
        dimension = original.dimension if original is not None else None
        if original is None or dimension is None:
            raise MissingDimensionError(f"无法获取原图尺寸: {self.path}", self.path)

        return build_uri_template(
            template_type,
            original.url or "",
            self._store_asset.name,
            dimension,
            self._default_args,
        )

    def __repr__(self) -> str:
        return (
            f"Asset(path={self.path!r}, crop={self._crop!r}, rotation={self._rotation!r})"
        )
