"""裁剪与旋转几何计算。

存储的裁剪参数总是相对于资源的网页优化预览版计算，
真正裁剪原图前需要按两者的尺寸比例换算一次。
"""

import math

from ..models.media_options import CropDimension, Dimension
from ..store.models import StoreAsset
from ..utils.logging_helpers import get_logger


logger = get_logger()


def round_half_up(value: float) -> int:
    """四舍五入到整数像素（0.5 向上）"""
    return int(math.floor(value + 0.5))


def rescale_crop_dimension(
    crop: CropDimension, source: Dimension, target: Dimension
) -> CropDimension:
    """把相对 source 的裁剪矩形换算到 target

    两个方向独立计算比例并独立取整，宽高比略有差异时得到非等比缩放。
    """
    ratio_x = target.width / source.width
    ratio_y = target.height / source.height

    left = round_half_up(crop.left * ratio_x)
    top = round_half_up(crop.top * ratio_y)
    width = round_half_up(crop.width * ratio_x)
    height = round_half_up(crop.height * ratio_y)

    # 取整误差不能让矩形超出目标图像
    width = max(1, min(width, target.width - left))
    height = max(1, min(height, target.height - top))

    return CropDimension(
        left=left, top=top, width=width, height=height, auto_crop=crop.auto_crop
    )


def get_crop_dimension_for_original(
    asset: StoreAsset, crop: CropDimension | None
) -> CropDimension | None:
    """把相对网页预览版的裁剪矩形换算到原图

    缺少预览版或原图尺寸时原样返回。

    Args:
        asset: 存储资源
        crop: 相对网页预览版的裁剪矩形

    Returns:
        CropDimension | None: 相对原图的裁剪矩形
    """
    if crop is None:
        return None

    web_rendition = asset.web_rendition
    original = asset.original
    if web_rendition is None or original is None:
        return crop

    source = web_rendition.dimension
    target = original.dimension
    if source is None or target is None:
        logger.debug(f"缺少尺寸信息，裁剪参数不换算: {asset.path}")
        return crop

    if source == target:
        return crop

    rescaled = rescale_crop_dimension(crop, source, target)
    logger.debug(
        f"裁剪参数换算到原图: {asset.path} "
        f"{crop.to_crop_string()} -> {rescaled.to_crop_string()}"
    )
    return rescaled


def get_auto_crop_dimension(width: int, height: int, ratio: float) -> CropDimension:
    """计算居中的、符合目标宽高比的最大裁剪矩形"""
    if width / height > ratio:
        crop_width = min(width, round_half_up(height * ratio))
        return CropDimension(
            left=(width - crop_width) // 2,
            top=0,
            width=crop_width,
            height=height,
            auto_crop=True,
        )
    crop_height = min(height, round_half_up(width / ratio))
    return CropDimension(
        left=0,
        top=(height - crop_height) // 2,
        width=width,
        height=crop_height,
        auto_crop=True,
    )


def crop_fits(crop: CropDimension, dimension: Dimension) -> bool:
    """裁剪矩形是否完全位于图像内"""
    return crop.right <= dimension.width and crop.bottom <= dimension.height


def rotate_dimension(dimension: Dimension, rotation: int | None) -> Dimension:
    """旋转 90/270 度时交换宽高"""
    if rotation in (90, 270):
        return Dimension(width=dimension.height, height=dimension.width)
    return dimension
