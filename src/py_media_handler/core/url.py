"""渲染版本 URL 构建。"""

from urllib.parse import urlsplit, urlunsplit

from ..config import get_config
from ..models.constants import UrlMode
from ..models.media_options import CropDimension


def build_transformed_path(
    base_url: str,
    file_name: str,
    width: int,
    height: int,
    crop: CropDimension | None = None,
    rotation: int | None = None,
) -> str:
    """为裁剪/旋转/缩放后的虚拟渲染版本生成 URL 路径

    格式: {base}.image_file.{width}.{height}[.{crop}][.r{rotation}].file/{name}
    """
    selectors = [f"image_file.{width}.{height}"]
    if crop is not None:
        selectors.append(crop.to_crop_string())
    if rotation:
        selectors.append(f"r{rotation}")
    return f"{base_url}.{'.'.join(selectors)}.file/{file_name}"


def externalize_url(
    url: str,
    url_mode: UrlMode | None = None,
    content_disposition_attachment: bool = False,
) -> str:
    """按 URL 模式处理主机名，并附加下载参数

    空 URL 原样返回，由调用方判定为无效渲染版本。
    """
    if not url:
        return ""

    media_config = get_config().media
    mode = url_mode or UrlMode.DEFAULT

    match mode:
        case UrlMode.FULL_URL:
            if url.startswith("/") and media_config.SITE_URL:
                url = media_config.SITE_URL + url
        case UrlMode.NO_HOSTNAME:
            parts = urlsplit(url)
            if parts.netloc:
                url = urlunsplit(("", "", parts.path, parts.query, parts.fragment))
        case _:
            pass

    if content_disposition_attachment:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{media_config.DOWNLOAD_PARAMETER}"

    return url
