"""资源存储接口。

核心逻辑把资源存储视为同步、已解析的依赖：每次请求调用一次 get_asset。
存储自身抛出的异常原样向上传播。
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .models import StoreAsset


@runtime_checkable
class AssetStore(Protocol):
    """资源存储协议"""

    def get_asset(self, media_ref: str) -> StoreAsset | None:
        """按引用获取资源，不存在时返回 None"""
        ...


def normalize_ref(media_ref: str) -> str:
    """统一资源引用格式（以 / 开头，无尾部 /）"""
    ref = media_ref.strip()
    if not ref:
        return ""
    return "/" + ref.strip("/")


class InMemoryAssetStore:
    """内存资源存储，用于测试和嵌入式场景"""

    def __init__(self, assets: Iterable[StoreAsset] = ()):
        self._assets: dict[str, StoreAsset] = {}
        for asset in assets:
            self.add(asset)

    def add(self, asset: StoreAsset) -> None:
        self._assets[normalize_ref(asset.path)] = asset

    def get_asset(self, media_ref: str) -> StoreAsset | None:
        return self._assets.get(normalize_ref(media_ref))

    def __len__(self) -> int:
        return len(self._assets)
