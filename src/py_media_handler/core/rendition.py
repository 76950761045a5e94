"""渲染版本选择。

根据 MediaArgs 与媒体格式的约束，从资源的全部渲染版本中选出最合适的一个，
并计算最终的裁剪/旋转/缩放参数。只做选择和几何计算，不做图像转码。
"""

from dataclasses import dataclass
from typing import Final

from ..config import get_config
from ..models.constants import MediaFileType
from ..models.media_args import MediaArgs
from ..models.media_options import CropDimension, Dimension, MediaFormat
from ..models.rendition import Rendition
from ..store.models import StoreAsset, StoreRendition
from ..utils.logging_helpers import get_logger
from .cropping import crop_fits, get_auto_crop_dimension, rotate_dimension
from .url import build_transformed_path, externalize_url


logger = get_logger()

# 宽高比匹配的相对容差
RATIO_TOLERANCE: Final[float] = 0.01


@dataclass(frozen=True)
class SizeRequirement:
    """一次解析的尺寸约束"""

    width: int = 0
    height: int = 0
    min_width: int = 0
    min_height: int = 0
    ratio: float | None = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.width or self.height or self.min_width or self.min_height or self.ratio
        )

    @classmethod
    def from_args(
        cls, args: MediaArgs, media_format: MediaFormat | None
    ) -> "SizeRequirement":
        """fixed_width/fixed_height 任一设置时整体替代媒体格式的固定尺寸，格式宽高比保留"""
        if media_format is not None and not media_format.has_size_constraints:
            media_format = None

        if args.fixed_width or args.fixed_height or media_format is None:
            width, height = args.fixed_width, args.fixed_height
        else:
            width, height = media_format.width, media_format.height
        if width and height:
            ratio: float | None = width / height
        else:
            ratio = media_format.effective_ratio if media_format else None
        return cls(
            width=width,
            height=height,
            min_width=media_format.min_width if media_format else 0,
            min_height=media_format.min_height if media_format else 0,
            ratio=ratio,
        )

    def target_for(self, source: Dimension) -> Dimension | None:
        """计算 source 满足约束时的目标尺寸，不满足返回 None（不放大）"""
        if self.ratio and not ratio_matches(source, self.ratio):
            return None

        ratio = self.ratio or source.width / source.height
        if self.width and self.height:
            target = Dimension(width=self.width, height=self.height)
        elif self.width:
            target = Dimension(
                width=self.width, height=max(1, round(self.width / ratio))
            )
        elif self.height:
            target = Dimension(
                width=max(1, round(self.height * ratio)), height=self.height
            )
        else:
            target = source

        if target.width > source.width or target.height > source.height:
            return None
        if target.width < self.min_width or target.height < self.min_height:
            return None
        return target


def ratio_matches(dimension: Dimension, ratio: float) -> bool:
    """宽高比在容差范围内一致"""
    if not dimension.height:
        return False
    actual = dimension.width / dimension.height
    return abs(actual - ratio) / ratio <= RATIO_TOLERANCE


class RenditionResolver:
    """渲染版本选择器

    每个 Asset 实例持有一个，裁剪参数在构造前已换算到原图。
    """

    def __init__(
        self,
        asset: StoreAsset,
        crop: CropDimension | None = None,
        rotation: int | None = None,
    ):
        self.asset = asset
        self.crop = crop
        self.rotation = rotation

    def resolve(
        self, args: MediaArgs, media_format: MediaFormat | None = None
    ) -> Rendition | None:
        """选择渲染版本

        Returns:
            Rendition | None: 选中的渲染版本（URL 可能为空），没有候选时为 None
        """
        candidates = self._filter_by_extension(self._candidates(args), args, media_format)
        if not candidates:
            logger.debug(f"没有符合扩展名约束的渲染版本: {self.asset.path}")
            return None

        requirement = SizeRequirement.from_args(args, media_format)
        if media_format is not None and media_format.download:
            requirement = SizeRequirement()

        if self._needs_transform(args, requirement):
            original = self.asset.original
            if original is None or original not in candidates:
                logger.debug(f"裁剪/旋转需要原图，但原图不在候选中: {self.asset.path}")
                return None
            return self._resolve_transformed(original, args, media_format, requirement)

        if requirement.is_empty:
            return self._build(self._pick_unconstrained(candidates), args, media_format)

        return self._resolve_constrained(candidates, args, media_format, requirement)

    # ------------------------------------------------------------------
    # 候选集合
    # ------------------------------------------------------------------

    def _candidates(self, args: MediaArgs) -> list[StoreRendition]:
        include_web = args.include_asset_web_renditions
        if include_web is None:
            include_web = get_config().media.INCLUDE_WEB_RENDITIONS

        candidates = []
        for rendition in self.asset.renditions:
            if rendition.is_thumbnail and not args.include_asset_thumbnails:
                continue
            if rendition.is_web_rendition and not include_web:
                continue
            candidates.append(rendition)
        return candidates

    def _extension_of(self, rendition: StoreRendition) -> str:
        if rendition.file_extension:
            return rendition.file_extension
        if rendition.is_original:
            return self.asset.file_extension
        return ""

    def _filter_by_extension(
        self,
        candidates: list[StoreRendition],
        args: MediaArgs,
        media_format: MediaFormat | None,
    ) -> list[StoreRendition]:
        allowed_sets = [set(args.file_extensions)]
        if media_format is not None:
            allowed_sets.append(set(media_format.extensions))
        for allowed in allowed_sets:
            if allowed:
                candidates = [c for c in candidates if self._extension_of(c) in allowed]
        return candidates

    # ------------------------------------------------------------------
    # 选择
    # ------------------------------------------------------------------

    def _needs_transform(self, args: MediaArgs, requirement: SizeRequirement) -> bool:
        """存在裁剪/旋转/自动裁剪时只能以原图为来源"""
        original = self.asset.original
        if original is None or original.dimension is None:
            return False
        if not MediaFileType.is_raster_image(self._extension_of(original)):
            return False
        if self.crop is not None or self.rotation:
            return True
        return bool(
            args.auto_crop
            and requirement.ratio
            and not ratio_matches(original.dimension, requirement.ratio)
        )

    def _resolve_transformed(
        self,
        original: StoreRendition,
        args: MediaArgs,
        media_format: MediaFormat | None,
        requirement: SizeRequirement,
    ) -> Rendition | None:
        source = original.dimension
        if source is None:
            return None

        crop = self.crop
        if crop is not None and not crop_fits(crop, source):
            logger.warning(
                f"裁剪区域超出原图范围: {self.asset.path} {crop.to_crop_string()}"
            )
            return None
        if crop is None and args.auto_crop and requirement.ratio:
            crop = get_auto_crop_dimension(source.width, source.height, requirement.ratio)

        effective = source
        if crop is not None:
            effective = Dimension(width=crop.width, height=crop.height)
        effective = rotate_dimension(effective, self.rotation)

        target = requirement.target_for(effective)
        if target is None:
            logger.debug(
                f"转换后的尺寸 {effective.width}x{effective.height} 不满足约束: {self.asset.path}"
            )
            return None
        return self._build(original, args, media_format, target, crop, self.rotation)

    def _pick_unconstrained(self, candidates: list[StoreRendition]) -> StoreRendition:
        """无尺寸约束时优先原图，否则取面积最大的"""
        for candidate in candidates:
            if candidate.is_original:
                return candidate
        return max(candidates, key=lambda c: (c.width or 0) * (c.height or 0))

    def _resolve_constrained(
        self,
        candidates: list[StoreRendition],
        args: MediaArgs,
        media_format: MediaFormat | None,
        requirement: SizeRequirement,
    ) -> Rendition | None:
        """取满足约束的最小候选；尺寸完全一致时直接使用，否则生成缩放版本"""
        matches: list[tuple[StoreRendition, Dimension]] = []
        for candidate in candidates:
            dimension = candidate.dimension
            if dimension is None:
                continue
            if not MediaFileType.is_raster_image(self._extension_of(candidate)):
                continue
            target = requirement.target_for(dimension)
            if target is not None:
                matches.append((candidate, target))

        if not matches:
            return None

        candidate, target = min(
            matches, key=lambda m: (m[0].width or 0) * (m[0].height or 0)
        )
        return self._build(candidate, args, media_format, target)

    # ------------------------------------------------------------------
    # 结果
    # ------------------------------------------------------------------

    def _build(
        self,
        source: StoreRendition,
        args: MediaArgs,
        media_format: MediaFormat | None,
        target: Dimension | None = None,
        crop: CropDimension | None = None,
        rotation: int | None = None,
    ) -> Rendition:
        extension = self._extension_of(source)
        file_name = self.asset.name
        if extension and not file_name.lower().endswith(f".{extension}"):
            file_name = f"{file_name.rsplit('.', 1)[0]}.{extension}"

        source_dimension = source.dimension
        dimension = target or source_dimension
        virtual = crop is not None or bool(rotation) or (
            target is not None and target != source_dimension
        )

        url = source.url or ""
        if url and virtual and dimension is not None:
            url = build_transformed_path(
                url, file_name, dimension.width, dimension.height, crop, rotation
            )
        url = externalize_url(url, args.url_mode, args.content_disposition_attachment)

        return Rendition(
            name=source.name,
            url=url,
            file_name=file_name,
            file_extension=extension,
            mime_type=source.mime_type or MediaFileType.get_mime_type(extension),
            rendition_type=MediaFileType.classify(extension),
            width=dimension.width if dimension else 0,
            height=dimension.height if dimension else 0,
            crop=crop,
            rotation=rotation,
            media_format=media_format,
            file_size=source.file_size,
            virtual=virtual,
        )
