"""Unit tests for the render-time building blocks."""

import pytest

from curly import RenderContext, RenderError, TemplateOptions
from curly.render_context import get_render_context, render_context
from curly.template import LoopContext, coerce_numeric, resolve_path, to_str


class TestResolvePath:
    def test_mapping_and_attribute_mix(self):
        class Obj:
            title = "T"

        assert resolve_path({"o": Obj()}, "o.title") == "T"

    def test_none_short_circuits(self):
        assert resolve_path({"a": None}, "a.b.c") is None

    def test_data_takes_precedence_for_at_paths(self):
        assert resolve_path({"@index": 9}, "@index", {"@index": 1}) == 1

    def test_at_path_falls_back_to_context(self):
        assert resolve_path({"@index": 9}, "@index", {}) == 9

    def test_index_out_of_range(self):
        assert resolve_path({"xs": [1]}, "xs.5") is None

    def test_strings_are_not_indexed(self):
        assert resolve_path({"s": "abc"}, "s.0") is None

    def test_empty_path(self):
        assert resolve_path({"": 1}, "") is None


class TestToStr:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("x", "x"),
            (0, "0"),
            (1.25, "1.25"),
            (float("inf"), "inf"),
            ((1, None, False), "1,,false"),
            ({"a": 1}, "{'a': 1}"),
        ],
    )
    def test_conversion(self, value, expected):
        assert to_str(value) == expected


class TestCoerceNumeric:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(3, 3), (2.5, 2.5), (" 7 ", 7), ("1e3", 1000.0), ("x", None), (True, None), (None, None)],
    )
    def test_coercion(self, value, expected):
        assert coerce_numeric(value) == expected


class TestLoopContext:
    def test_iteration_metadata(self):
        loop = LoopContext(["a", "b", "c"])
        seen = [(item, loop.index, loop.first, loop.last) for item in loop]
        assert seen == [("a", 0, True, False), ("b", 1, False, False), ("c", 2, False, True)]
        assert loop.length == 3

    def test_scope_merges_mappings(self):
        loop = LoopContext([{"v": 1}])
        (item,) = list(loop)
        assert loop.scope(item) == {"v": 1, "@index": 0, "@first": True, "@last": True}

    def test_scope_passes_scalars(self):
        loop = LoopContext([5])
        (item,) = list(loop)
        assert loop.scope(item) == 5
        assert loop.data() == {"@index": 0, "@first": True, "@last": True}


class TestTemplateOptions:
    def test_merge_inherits_none(self):
        base = TemplateOptions(strict=True)
        assert base.merge() is base
        assert base.merge(no_escape=True) == TemplateOptions(strict=True, no_escape=True)
        assert base.merge(strict=False).strict is False


class TestRenderContext:
    def test_child_context_tracks_partials(self):
        root = RenderContext(template_name="page", source="{{> a}}")
        child = root.child_context("a", "{{> b}}")
        assert child.template_name == "a"
        assert child.partial_stack == ("a",)
        assert root.partial_stack == ()

    def test_cycle_detected(self):
        ctx = RenderContext().child_context("a", "").child_context("b", "")
        with pytest.raises(RenderError, match="a -> b -> a"):
            ctx.check_partial_cycle("a")

    def test_context_var_scoped(self):
        assert get_render_context() is None
        ctx = RenderContext(template_name="t")
        with render_context(ctx) as active:
            assert active is ctx
            assert get_render_context() is ctx
        assert get_render_context() is None
