"""媒体处理器测试。

测试请求解析流程、无效原因、占位图回退和标记生成。
"""

import pytest

from py_media_handler.config import reset_config
from py_media_handler.core.handler import MediaHandler
from py_media_handler.models.constants import DragDropSupport, MediaInvalidReason
from py_media_handler.models.media_options import MediaFormat, WidthOption
from py_media_handler.store.base import InMemoryAssetStore
from tests.conftest import IMAGE_REF, WEB_RENDITION_URL, create_handler, create_resource


class TestProcessRequest:
    """解析流程测试"""

    def test_resolve_by_ref(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).build()

        assert media.is_valid
        assert media.media_ref == IMAGE_REF
        assert media.url == IMAGE_REF
        assert media.rendition.name == "original"
        assert media.media_invalid_reason is None

    def test_resolve_by_resource_with_crop_and_rotation(self, handler: MediaHandler):
        """裁剪参数相对预览版存储，按原图尺寸换算后使用"""
        resource = create_resource(
            mediaRef=IMAGE_REF, mediaCrop="100,50,300,200", mediaRotation="90"
        )

        media = handler.get(resource).build()

        assert media.is_valid
        assert media.crop_dimension.to_crop_string() == "100,50,300,200"
        assert media.rendition.crop.to_crop_string() == "200,100,600,400"
        assert media.rotation == 90
        assert (media.rendition.width, media.rendition.height) == (300, 400)

    def test_override_property_names(self, handler: MediaHandler):
        resource = create_resource(teaserRef=IMAGE_REF, teaserRotation=180)

        media = (
            handler.get(resource)
            .ref_property("teaserRef")
            .rotation_property("teaserRotation")
            .build()
        )

        assert media.is_valid
        assert media.rotation == 180
        assert ".r180." in media.url

    def test_named_media_format(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).media_format_names("teaser").build()

        assert media.is_valid
        assert media.rendition.media_format.name == "teaser"
        assert media.url == f"{WEB_RENDITION_URL}.image_file.400.300.file/sample.jpg"

    def test_first_matching_format_wins(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).media_format_names("square", "standard").build()

        assert media.is_valid
        assert media.rendition.media_format.name == "standard"
        assert len(media.renditions) == 1

    def test_all_mandatory_formats(self, handler: MediaHandler):
        media = (
            handler.get(IMAGE_REF)
            .mandatory_media_format_names("standard", "square")
            .auto_crop(True)
            .build()
        )

        assert media.is_valid
        assert [r.media_format.name for r in media.renditions] == ["standard", "square"]
        assert media.rendition.media_format.name == "standard"

    def test_not_enough_mandatory_formats(self, handler: MediaHandler):
        media = (
            handler.get(IMAGE_REF).mandatory_media_format_names("standard", "square").build()
        )

        assert not media.is_valid
        assert media.media_invalid_reason == MediaInvalidReason.NOT_ENOUGH_MATCHING_RENDITIONS
        assert media.asset is not None

    def test_no_matching_rendition(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).media_format_names("square").build()

        assert not media.is_valid
        assert media.media_invalid_reason == MediaInvalidReason.NO_MATCHING_RENDITION
        assert media.url is None
        assert media.markup is None

    def test_media_format_object(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).media_format(MediaFormat(name="banner", width=800)).build()

        assert media.is_valid
        assert media.url == WEB_RENDITION_URL

    def test_unknown_media_format(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).media_format_names("unknown").build()

        assert media.media_invalid_reason == MediaInvalidReason.INVALID_MEDIA_FORMAT

    def test_download_format(self, handler: MediaHandler):
        media = handler.get("/content/dam/doc.pdf").media_format_names("download").build()

        assert media.is_valid
        assert media.rendition.is_download
        assert media.markup == '<a href="/content/dam/doc.pdf">doc.pdf</a>'

    def test_flash_markup(self, handler: MediaHandler):
        media = handler.get("/content/dam/movie.swf").build()

        assert media.rendition.is_flash
        assert media.element.tag == "object"
        assert media.element.attributes["type"] == "application/x-shockwave-flash"

    def test_empty_url_is_invalid(self, handler: MediaHandler):
        media = handler.get("/content/dam/broken.jpg").build()

        assert not media.is_valid
        assert media.media_invalid_reason == MediaInvalidReason.NO_MATCHING_RENDITION

    def test_store_errors_propagate(self, media_formats: list[MediaFormat]):
        """资源存储的异常原样传播"""

        class FailingStore:
            def get_asset(self, media_ref):
                raise ConnectionError("store unavailable")

        handler = MediaHandler(FailingStore(), media_formats=media_formats)

        with pytest.raises(ConnectionError):
            handler.get(IMAGE_REF).build()


class TestInvalidReasons:
    """无效原因测试"""

    def test_missing_reference(self, handler: MediaHandler):
        media = handler.get(create_resource()).build()

        assert media.media_invalid_reason == MediaInvalidReason.MEDIA_REFERENCE_MISSING
        assert media.media_ref is None

    def test_invalid_reference(self, handler: MediaHandler):
        media = handler.get("/content/dam/missing.jpg").build()

        assert media.media_invalid_reason == MediaInvalidReason.MEDIA_REFERENCE_INVALID
        assert media.media_ref == "/content/dam/missing.jpg"

    @pytest.mark.parametrize("rotation", [45, "abc", 360])
    def test_invalid_rotation(self, handler: MediaHandler, rotation):
        """无效的持久化角度不会被当作不旋转处理"""
        media = handler.get(create_resource(mediaRef=IMAGE_REF, mediaRotation=rotation)).build()

        assert not media.is_valid
        assert media.media_invalid_reason == MediaInvalidReason.INVALID_ROTATION
        assert media.invalid_message

    def test_invalid_crop(self, handler: MediaHandler):
        media = handler.get(create_resource(mediaRef=IMAGE_REF, mediaCrop="1,2,3")).build()

        assert media.media_invalid_reason == MediaInvalidReason.INVALID_CROP

    def test_dummy_image_disabled_by_default(self, handler: MediaHandler):
        media = handler.get("/content/dam/missing.jpg").build()

        assert not media.dummy
        assert media.element is None

    def test_dummy_image_fallback(self, handler: MediaHandler, monkeypatch):
        monkeypatch.setenv("PMH_ENABLE_DUMMY_IMAGES", "true")
        reset_config()

        media = handler.get("/content/dam/missing.jpg").fixed_dimension(300, 200).build()

        assert not media.is_valid
        assert media.dummy
        assert media.url == "/static/media/dummy.png"
        assert media.markup == (
            '<img src="/static/media/dummy.png" alt="" width="300" height="200" '
            'class="media-dummy">'
        )

    def test_dummy_image_custom_url_and_opt_out(self, handler: MediaHandler, monkeypatch):
        monkeypatch.setenv("PMH_ENABLE_DUMMY_IMAGES", "1")
        reset_config()

        custom = handler.get("/content/dam/missing.jpg").dummy_image_url("/x.png").build()
        assert custom.url == "/x.png"

        opted_out = handler.get("/content/dam/missing.jpg").dummy_image(False).build()
        assert not opted_out.dummy
        assert opted_out.url is None


class TestMarkup:
    """标记生成测试"""

    def test_img_markup(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).build()

        assert media.markup == (
            f'<img src="{IMAGE_REF}" alt="A sample image" width="1600" height="1200">'
        )

    def test_alt_override_escaped(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).alt_text('Say "hi" & <wave>').build()

        assert 'alt="Say &quot;hi&quot; &amp; &lt;wave&gt;"' in media.markup

    def test_drag_drop_class(self, handler: MediaHandler):
        by_resource = handler.get(create_resource(mediaRef=IMAGE_REF)).build()
        assert by_resource.element.attributes["class"] == "media-dd"

        by_ref = handler.get(IMAGE_REF).build()
        assert "class" not in by_ref.element.attributes

        always = handler.get(IMAGE_REF).drag_drop_support(DragDropSupport.ALWAYS).build()
        assert always.element.attributes["class"] == "media-dd"

        never = (
            handler.get(create_resource(mediaRef=IMAGE_REF))
            .drag_drop_support(DragDropSupport.NEVER)
            .build()
        )
        assert "class" not in never.element.attributes

    def test_image_sizes_srcset(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).image_sizes("100vw", 400, 800).build()

        attributes = media.element.attributes
        assert attributes["sizes"] == "100vw"
        assert attributes["srcset"] == (
            f"{WEB_RENDITION_URL}.image_file.400.300.file/sample.jpg 400w, "
            f"{WEB_RENDITION_URL} 800w"
        )

    def test_image_sizes_with_fixed_size_format(self, handler: MediaHandler):
        """响应式宽度沿用固定尺寸格式的宽高比"""
        media = (
            handler.get(IMAGE_REF)
            .media_format_names("teaser")
            .image_sizes("100vw", 200, 400)
            .build()
        )

        attributes = media.element.attributes
        assert (attributes["width"], attributes["height"]) == ("400", "300")
        assert attributes["srcset"] == (
            f"{WEB_RENDITION_URL}.image_file.200.150.file/sample.jpg 200w, "
            f"{WEB_RENDITION_URL}.image_file.400.300.file/sample.jpg 400w"
        )

    def test_missing_mandatory_width_omits_srcset(self, handler: MediaHandler):
        media = handler.get(IMAGE_REF).image_sizes("100vw", 400, 3200).build()

        assert media.is_valid
        assert "srcset" not in media.element.attributes

    def test_optional_width_skipped(self, handler: MediaHandler):
        media = (
            handler.get(IMAGE_REF)
            .image_sizes("100vw", 400, WidthOption(width=3200, mandatory=False))
            .build()
        )

        assert media.element.attributes["srcset"].endswith(" 400w")

    def test_picture_markup(self, handler: MediaHandler):
        standard = MediaFormat(name="standard", ratio=4 / 3)
        teaser = MediaFormat(name="teaser", width=400, height=300)

        media = (
            handler.get(IMAGE_REF)
            .picture_source(standard, 400, media="(min-width: 600px)")
            .picture_source(teaser, 200, 400)
            .build()
        )

        assert media.element.tag == "picture"
        tags = [child.tag for child in media.element.children]
        assert tags == ["source", "source", "img"]
        standard_source, teaser_source = media.element.children[:2]
        assert standard_source.attributes["media"] == "(min-width: 600px)"
        assert standard_source.attributes["srcset"] == (
            f"{WEB_RENDITION_URL}.image_file.400.300.file/sample.jpg 400w"
        )
        assert "media" not in teaser_source.attributes
        assert teaser_source.attributes["srcset"] == (
            f"{WEB_RENDITION_URL}.image_file.200.150.file/sample.jpg 200w, "
            f"{WEB_RENDITION_URL}.image_file.400.300.file/sample.jpg 400w"
        )
        assert media.markup.startswith("<picture><source ")
        assert media.markup.endswith("</picture>")

    def test_picture_source_without_match_is_skipped(self, handler: MediaHandler):
        """格式无法匹配的 source 不输出，<img> 仍然保留"""
        square = MediaFormat(name="square", ratio=1.0)

        media = handler.get(IMAGE_REF).picture_source(square, 400).build()

        assert media.is_valid
        assert [child.tag for child in media.element.children] == ["img"]


class TestRequestIsolation:
    """请求之间互不影响"""

    def test_handlers_share_no_request_state(self, store: InMemoryAssetStore):
        handler = create_handler(store, [MediaFormat(name="standard", ratio=4 / 3)])

        first = handler.get(IMAGE_REF).media_format_names("standard").build()
        second = handler.get(IMAGE_REF).build()

        assert first.rendition.media_format.name == "standard"
        assert second.rendition.media_format is None
        assert first.media_request.media_args.media_format_names == ["standard"]
