"""MCP 服务器功能演示

展示 MCP 服务器的两个工具：
- 🎯 resolve_media: 解析媒体引用
- 📊 get_asset_info: 资源信息查询
"""

import json
from pathlib import Path
from typing import Any

from PIL import Image

from py_media_handler.mcp_server import get_asset_info, resolve_media


def _call(tool: Any, **kwargs) -> dict[str, Any]:
    """调用 MCP 工具包装的原始函数"""
    return getattr(tool, "fn", tool)(**kwargs)


def get_asset_root() -> Path:
    """获取演示资源目录 - 使用项目的 tmp 目录"""
    project_root = Path(__file__).parent.parent
    root = project_root / "tmp" / "mcp_demo"
    renditions = root / "gallery" / "city.png.renditions"
    renditions.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (1920, 1080), color="darkorange").save(
        root / "gallery" / "city.png", "PNG"
    )
    Image.new("RGB", (960, 540), color="darkorange").save(
        renditions / "web.960.540.png", "PNG"
    )
    return root


def demo_asset_info(root: Path):
    print("\n📊 get_asset_info")
    result = _call(get_asset_info, root=str(root), media_ref="gallery/city.png")
    if not result["success"]:
        print(f"  ❌ {result['error']}")
        return
    for rendition in result["renditions"]:
        print(
            f"  - {rendition['name']}: {rendition['width']}x{rendition['height']} "
            f"{rendition['file_size_human']}"
        )


def demo_resolve(root: Path):
    print("\n🎯 resolve_media")
    scenarios = [
        {"width": 480},
        {"crop": "0,0,480,270"},
        {"crop": "0,0,480,270", "rotation": 270, "url_mode": "full_url"},
        {"media_ref": "gallery/none.png"},
    ]
    for scenario in scenarios:
        kwargs = {"root": str(root), "media_ref": "gallery/city.png", **scenario}
        result = _call(resolve_media, **kwargs)
        print(f"  {scenario}:")
        summary = {k: result.get(k) for k in ("success", "url", "invalid_reason")}
        print(f"    {json.dumps(summary, ensure_ascii=False)}")


def main():
    root = get_asset_root()
    demo_asset_info(root)
    demo_resolve(root)


if __name__ == "__main__":
    main()
