"""请求构建器测试。

测试三种创建方式、格式必需标记对齐、参数复制和构建时校验。
"""

import pytest

from py_media_handler.core.builder import MediaBuilder, reconcile_media_format_options
from py_media_handler.core.handler import MediaHandler
from py_media_handler.exceptions import ValidationError
from py_media_handler.models.constants import DragDropSupport, UrlMode
from py_media_handler.models.media_args import MediaArgs
from py_media_handler.models.media_options import MediaFormat, WidthOption
from py_media_handler.models.media_request import MediaRequest
from py_media_handler.models.resource import ComponentDefinition, Resource
from tests.conftest import IMAGE_REF


class TestMandatoryReconciliation:
    """格式必需标记对齐测试"""

    def test_single_flag_broadcast(self):
        options = reconcile_media_format_options(["a", "b", "c"], [True])

        assert [o.mandatory for o in options] == [True, True, True]

    def test_flags_align_by_index(self):
        options = reconcile_media_format_options(["a", "b", "c", "d"], [True, False])

        assert [o.mandatory for o in options] == [True, False, False, False]
        assert [o.name for o in options] == ["a", "b", "c", "d"]

    def test_no_flags(self):
        options = reconcile_media_format_options(["a", "b"], None)

        assert [o.mandatory for o in options] == [False, False]

    def test_no_names(self):
        assert reconcile_media_format_options(None, [True]) == ()


class TestBuilderConstruction:
    """构建器创建方式测试"""

    def test_for_resource_reads_component_config(self, handler: MediaHandler):
        base = ComponentDefinition(
            resource_type="core/image",
            properties={
                "mediaFormats": ["standard", "square"],
                "mediaFormatsMandatory": ["true"],
                "mediaAutoCrop": "true",
            },
        )
        component = ComponentDefinition(resource_type="site/image", super_component=base)
        resource = Resource(
            path="/content/page/image",
            properties={"mediaRef": IMAGE_REF},
            component=component,
        )

        args = handler.get(resource).media_args

        assert args.auto_crop
        assert args.media_format_names == ["standard", "square"]
        assert all(o.mandatory for o in args.media_format_options)

    def test_for_resource_single_format_name(self, handler: MediaHandler):
        resource = Resource(
            path="/content/page/image",
            component=ComponentDefinition(
                resource_type="site/image", properties={"mediaFormats": "wide"}
            ),
        )

        args = handler.get(resource).media_args

        assert args.media_format_names == ["wide"]
        assert not args.has_mandatory_media_formats
        assert not args.auto_crop

    def test_for_ref_uses_library_defaults(self, handler: MediaHandler):
        args = handler.get(IMAGE_REF).media_args

        assert args.media_format_options == ()
        assert not args.auto_crop
        assert args.alt_text is None
        assert args.dummy_image

    def test_null_subject_rejected(self, handler: MediaHandler):
        with pytest.raises(ValidationError):
            handler.get(None)
        with pytest.raises(ValidationError):
            handler.get(42)
        with pytest.raises(ValidationError):
            MediaBuilder.for_request(None, handler)

    def test_null_setter_values_rejected(self, handler: MediaHandler):
        """非空约束的设置方法立即失败"""
        builder = handler.get(IMAGE_REF)

        with pytest.raises(ValidationError):
            builder.args(None)
        with pytest.raises(ValidationError):
            builder.alt_text(None)
        with pytest.raises(ValidationError):
            builder.media_format_names("square", None)
        with pytest.raises(ValidationError):
            builder.url_mode(None)
        with pytest.raises(ValidationError):
            builder.fixed_width(-10)
        with pytest.raises(ValidationError):
            builder.image_sizes("100vw")
        with pytest.raises(ValidationError):
            builder.media_formats_mandatory(None)

    def test_media_formats_mandatory_kept_on_null(self, handler: MediaHandler):
        builder = handler.get(IMAGE_REF).mandatory_media_format_names("standard")

        with pytest.raises(ValidationError):
            builder.media_formats_mandatory(None)

        assert builder.media_args.has_mandatory_media_formats

    def test_fixed_dimension_is_all_or_nothing(self, handler: MediaHandler):
        """高度无效时宽度也保持原值"""
        builder = handler.get(IMAGE_REF).fixed_dimension(400, 300)

        with pytest.raises(ValidationError):
            builder.fixed_dimension(800, -1)
        with pytest.raises(ValidationError):
            builder.fixed_dimension(800, None)

        args = builder.media_args
        assert (args.fixed_width, args.fixed_height) == (400, 300)

    def test_setters_are_chainable(self, handler: MediaHandler):
        builder = handler.get(IMAGE_REF)

        result = (
            builder.media_format_names("standard")
            .fixed_dimension(400, 300)
            .url_mode(UrlMode.NO_HOSTNAME)
            .alt_text("Alt")
            .decorative(False)
            .dummy_image(False)
            .include_asset_thumbnails(True)
            .drag_drop_support(DragDropSupport.NEVER)
            .property("tracking", "abc")
            .file_extension("jpg")
        )

        assert result is builder
        args = builder.media_args
        assert (args.fixed_width, args.fixed_height) == (400, 300)
        assert args.properties == {"tracking": "abc"}
        assert args.file_extensions == ("jpg",)


class TestCopyOnWrite:
    """参数复制语义测试"""

    def test_args_cloned_on_entry(self, handler: MediaHandler):
        template = MediaArgs(alt_text="Template")
        builder = handler.get(IMAGE_REF).args(template)
        builder.alt_text("Changed")

        assert template.alt_text == "Template"
        assert builder.media_args.alt_text == "Changed"

    def test_derived_builder_does_not_alter_original_request(
        self, handler: MediaHandler
    ):
        """从已构建请求派生的构建器修改格式，原请求仍为 square"""
        r1 = handler.get(IMAGE_REF).media_format_names("square").build_request()

        b2 = handler.get(r1)
        b2.media_format_names("wide")
        r2 = b2.build_request()

        assert r1.media_args.media_format_names == ["square"]
        assert r2.media_args.media_format_names == ["wide"]
        assert r2.media_ref == r1.media_ref

    def test_derived_builder_carries_override_names(self, handler: MediaHandler):
        resource = Resource(path="/content/page/image", properties={"teaserRef": IMAGE_REF})
        r1 = (
            handler.get(resource)
            .ref_property("teaserRef")
            .crop_property("teaserCrop")
            .build_request()
        )

        r2 = handler.get(r1).build_request()

        assert r2.resource == resource
        assert r2.ref_property == "teaserRef"
        assert r2.crop_property == "teaserCrop"
        assert r2.rotation_property is None

    def test_builder_mutation_after_build_request(self, handler: MediaHandler):
        builder = handler.get(IMAGE_REF).alt_text("first")
        request = builder.build_request()
        builder.alt_text("second")

        assert request.media_args.alt_text == "first"


class TestResponsiveExclusivity:
    """响应式策略互斥测试（构建时校验）"""

    def test_image_sizes_then_picture_source(self, handler: MediaHandler):
        fmt = MediaFormat(name="standard", ratio=4 / 3)
        builder = handler.get(IMAGE_REF).image_sizes("100vw", 400, 800)
        builder.picture_source(fmt, 400)

        with pytest.raises(ValidationError):
            builder.build_request()

    def test_picture_source_then_image_sizes(self, handler: MediaHandler):
        fmt = MediaFormat(name="standard", ratio=4 / 3)
        builder = handler.get(IMAGE_REF).picture_source(fmt, 400).image_sizes("100vw", 400)

        with pytest.raises(ValidationError):
            builder.build()

    def test_only_image_sizes(self, handler: MediaHandler):
        request = handler.get(IMAGE_REF).image_sizes("100vw", 400, 800).build_request()

        assert request.media_args.image_sizes.sizes == "100vw"
        assert request.media_args.picture_sources is None

    def test_picture_sources_keep_call_order(self, handler: MediaHandler):
        wide = MediaFormat(name="wide", ratio=16 / 9)
        standard = MediaFormat(name="standard", ratio=4 / 3)
        request = (
            handler.get(IMAGE_REF)
            .picture_source(wide, 800, media="(min-width: 1024px)")
            .picture_source(standard, WidthOption(width=400, mandatory=False))
            .build_request()
        )

        sources = request.media_args.picture_sources
        assert [s.media_format.name for s in sources] == ["wide", "standard"]
        assert sources[0].media == "(min-width: 1024px)"
        assert not sources[1].width_options[0].mandatory


class TestConvenienceFinalizers:
    """便捷构建方法测试"""

    def test_finalizers_resolve_once(self, handler: MediaHandler, monkeypatch):
        calls: list[MediaRequest] = []
        process_request = handler.process_request

        def counting(request):
            calls.append(request)
            return process_request(request)

        monkeypatch.setattr(handler, "process_request", counting)

        markup = handler.get(IMAGE_REF).build_markup()
        assert len(calls) == 1
        assert markup.startswith("<img ")

        url = handler.get(IMAGE_REF).build_url()
        assert len(calls) == 2
        assert url == IMAGE_REF

        element = handler.get(IMAGE_REF).build_element()
        assert len(calls) == 3
        assert element.tag == "img"
