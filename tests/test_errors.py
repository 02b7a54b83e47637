"""Tests for error wrapping, codes and formatting."""

from __future__ import annotations

import sys
from collections.abc import Mapping

import pytest

from curly import CompileError, ErrorCode, RenderError, TemplateError, UnknownHelperError
from curly.environment import build_source_snippet
from curly.environment import terminal


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    """Keep diagnostics free of ANSI codes regardless of the terminal."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


class TestHelperFailures:
    """Exceptions raised inside helpers surface as RenderError."""

    def test_helper_exception_wrapped(self, env):
        def boom(value):
            raise ValueError("bad value")

        env.register_helper("boom", boom)
        with pytest.raises(RenderError) as exc_info:
            env.render("{{boom x}}", {"x": 1})
        err = exc_info.value
        assert err.helper == "boom"
        assert isinstance(err.__cause__, ValueError)
        assert err.original is err.__cause__
        assert err.code is ErrorCode.HELPER_ERROR
        assert "bad value" in str(err)

    def test_block_helper_exception_wrapped(self, env):
        def explode(options):
            raise KeyError("k")

        env.register_helper("explode", explode, block=True)
        with pytest.raises(RenderError) as exc_info:
            env.render("{{#explode}}{{/explode}}")
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_filter_exception_wrapped(self, env):
        env.register_helper("half", lambda v: v / 2)
        with pytest.raises(RenderError, match="half"):
            env.render("{{s | half}}", {"s": "text"})

    def test_nested_render_error_not_rewrapped(self, env_strict):
        with pytest.raises(UnknownHelperError):
            env_strict.render("{{#if ok}}{{#nope}}{{/nope}}{{/if}}", {"ok": True})

    def test_block_helper_used_inline(self, env):
        with pytest.raises(RenderError, match="block helper 'each'"):
            env.render("{{each items}}", {"items": [1]})

    def test_conversion_error(self, env):
        class Unprintable:
            def __str__(self):
                raise RuntimeError("no text")

        with pytest.raises(RenderError) as exc_info:
            env.render("{{v}}", {"v": Unprintable()})
        assert exc_info.value.code is ErrorCode.CONVERSION_ERROR
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_render_errors_are_template_errors(self, env):
        env.register_helper("fail", lambda: 1 / 0)
        with pytest.raises(TemplateError):
            env.render("{{#fail}}{{/fail}}")


class TestFormatting:
    def test_render_error_message(self, env):
        env.register_helper("boom", lambda v: int("x"))
        with pytest.raises(RenderError) as exc_info:
            env.compile("line one\n{{boom v}}", name="page.hbs")({"v": 1})
        message = str(exc_info.value)
        assert message.startswith("Render Error: helper 'boom' raised ValueError")
        assert "  Helper: boom" in message
        assert "  Location: page.hbs:2" in message
        assert "{{boom v}}" in message

    def test_render_error_compact(self, env):
        env.register_helper("boom", lambda v: int("x"))
        with pytest.raises(RenderError) as exc_info:
            env.render("{{boom v}}", {"v": 1})
        compact = exc_info.value.format_compact()
        assert compact.startswith("C-RUN-001: helper 'boom'")
        assert "  |" not in compact

    def test_compile_error_message(self, env):
        with pytest.raises(CompileError) as exc_info:
            env.compile("{{#if x}}no end", name="t.hbs")
        err = exc_info.value
        assert str(err).startswith("unclosed block: if\n  --> t.hbs:1:0")
        assert ">  1 | {{#if x}}no end" in str(err)
        assert err.format_compact() == "C-PAR-001: unclosed block: if\n  --> t.hbs:1:0"

    def test_compile_error_without_source(self):
        err = CompileError("unclosed block: each", name="each")
        assert str(err) == "unclosed block: each\n  --> <template>"

    def test_base_format_compact_adds_code(self):
        class Custom(TemplateError):
            code = ErrorCode.HELPER_ERROR

        assert Custom("oops").format_compact() == "C-RUN-001: oops"


class TestErrorCodes:
    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.UNCLOSED_BLOCK, "parser"),
            (ErrorCode.HELPER_ERROR, "runtime"),
            (ErrorCode.PARTIAL_CYCLE, "runtime"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_codes_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestSourceSnippet:
    def test_context_lines(self):
        source = "\n".join(f"line {i}" for i in range(1, 8))
        snippet = build_source_snippet(source, 4, context_lines=1)
        assert [lineno for lineno, _ in snippet.lines] == [3, 4, 5]
        assert snippet.error_line == 4

    def test_format_marks_error_line(self):
        snippet = build_source_snippet("a\nb\nc", 2, column=0)
        text = snippet.format()
        assert ">  2 | b" in text
        assert "   1 | a" in text
        assert "^" in text


class TestPathResolutionFailures:
    """Exceptions raised by the caller's context surface as RenderError."""

    def test_property_exception_wrapped(self, env):
        class Obj:
            @property
            def name(self):
                raise ValueError("boom")

        with pytest.raises(RenderError) as exc_info:
            env.compile("ok\n{{o.name}}", name="page.hbs")({"o": Obj()})
        err = exc_info.value
        assert isinstance(err.__cause__, ValueError)
        assert err.code is ErrorCode.CONVERSION_ERROR
        assert "o.name" in str(err)
        assert "page.hbs:2" in str(err)

    def test_mapping_get_exception_wrapped(self, env):
        class Exploding(Mapping):
            def __getitem__(self, key):
                raise RuntimeError("no access")

            def __iter__(self):
                return iter(())

            def __len__(self):
                return 0

            def get(self, key, default=None):
                raise RuntimeError("no access")

        with pytest.raises(RenderError) as exc_info:
            env.render("{{#if flag}}x{{/if}}", Exploding())
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestDeepNesting:
    def test_nesting_beyond_recursion_limit(self, env):
        depth = sys.getrecursionlimit() + 100
        source = "{{#if x}}" * depth + "{{/if}}" * depth
        with pytest.raises(CompileError) as exc_info:
            env.compile(source)
        err = exc_info.value
        assert err.code is ErrorCode.NESTING_TOO_DEEP
        assert err.name == "if"
        assert err.format_compact().startswith("C-PAR-002: blocks nested too deeply: if")
