"""Tests for partial registration and rendering."""

import pytest

from curly import ErrorCode, RenderError, get_render_context


class TestPartials:
    """``{{> name}}`` references."""

    def test_registered_partial(self, env_with_partials):
        assert env_with_partials.render("{{> greeting}}") == "hi"

    def test_partial_sees_caller_context(self, env_with_partials):
        ctx = {"name": "Ada", "email": "ada@example.com"}
        assert env_with_partials.render("{{> user}}", ctx) == "Ada <ada@example.com>"

    def test_context_expression_merged_over_caller(self, env_with_partials):
        ctx = {"name": "outer", "email": "outer@x", "author": {"name": "Ada"}}
        assert env_with_partials.render("{{> user author}}", ctx) == "Ada <outer@x>"

    def test_non_mapping_context_expression_ignored(self, env_with_partials):
        ctx = {"name": "A", "email": "a@x", "n": 5}
        assert env_with_partials.render("{{> user n}}", ctx) == "A <a@x>"

    def test_partial_inside_each_sees_loop_metadata(self, env_with_partials):
        ctx = {"items": [{"label": "a"}, {"label": "b"}]}
        result = env_with_partials.render("{{#each items}}{{> row}}{{/each}}", ctx)
        assert result == "[0:a][1:b]"

    def test_missing_partial_renders_empty(self, env):
        assert env.render("a{{> nope}}b") == "ab"

    def test_partial_registered_after_compile(self, env):
        template = env.compile("<{{> late}}>")
        assert template({}) == "<>"
        env.register_partial("late", "here")
        assert template({}) == "<here>"

    def test_overwrite_partial(self, env):
        env.register_partial("p", "one")
        env.register_partial("p", "two")
        assert env.render("{{> p}}") == "two"

    def test_nested_partials(self, env):
        env.register_partials({"outer": "(" + "{{> inner}}" + ")", "inner": "{{x}}"})
        assert env.render("{{> outer}}", {"x": 1}) == "(1)"

    def test_same_partial_twice_is_not_a_cycle(self, env):
        env.register_partial("dot", ".")
        assert env.render("{{> dot}}{{> dot}}") == ".."

    def test_partial_inherits_no_escape(self, env):
        env.register_partial("raw", "{{v}}")
        assert env.render("{{> raw}}", {"v": "<i>"}, no_escape=True) == "<i>"

    def test_list_partials(self, env_with_partials):
        assert env_with_partials.list_partials() == ["greeting", "row", "user"]


class TestPartialCycles:
    """A partial that includes itself is reported instead of recursing."""

    def test_self_inclusion(self, env):
        env.register_partial("loop", "x{{> loop}}")
        with pytest.raises(RenderError, match="partial cycle detected") as exc_info:
            env.render("{{> loop}}")
        assert exc_info.value.code is ErrorCode.PARTIAL_CYCLE
        assert exc_info.value.partial == "loop"

    def test_indirect_cycle(self, env):
        env.register_partials({"a": "{{> b}}", "b": "{{> a}}"})
        with pytest.raises(RenderError) as exc_info:
            env.render("{{> a}}")
        assert "a -> b -> a" in str(exc_info.value)


class TestPartialRenderContext:
    def test_helpers_see_partial_render_context(self, env):
        seen = []

        def where():
            ctx = get_render_context()
            seen.append((ctx.template_name, ctx.partial_stack))
            return ""

        env.register_helper("where", where)
        env.register_partials({"outer": "{{#where}}{{/where}}{{> inner}}", "inner": "{{#where}}{{/where}}"})
        env.compile("{{#where}}{{/where}}{{> outer}}{{#where}}{{/where}}", name="page")({})
        assert seen == [
            ("page", ()),
            ("outer", ("outer",)),
            ("inner", ("outer", "inner")),
            ("page", ()),
        ]
