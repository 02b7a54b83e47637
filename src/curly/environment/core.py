"""Curly Environment: the engine object owning registries and the cache.

Each Environment is independent. Helpers, partials and compiled templates
registered on one are invisible to another, and there is no module-level
default instance:

    >>> from curly import Environment
    >>> env = Environment()
    >>> env.register_partial("greeting", "hi {{name}}")
    >>> env.render("{{> greeting}}!", {"name": "Ada"})
    'hi Ada!'

Pipeline:
    compile(source) → tokenize → Parser → Template (cached by exact source)
    render(source, context) → compile(source)(context)

Thread-Safety:
    Registries are copy-on-write, so a render in progress keeps a consistent
    view. The compilation cache is a plain dict; concurrent registration or
    compilation on the *same* Environment needs external locking.

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from curly.environment.cache import CacheStats, CompilationCache
from curly.environment.helpers import DEFAULT_HELPERS
from curly.environment.options import TemplateOptions
from curly.environment.registry import Helper, Registry
from curly.lexer import tokenize
from curly.parser import Parser
from curly.template import Template
from curly.template.renderer import Renderer

logger = logging.getLogger(__name__)


def _preview(source: str, limit: int = 50) -> str:
    return source if len(source) <= limit else source[:limit] + "..."


class Environment:
    """Template engine instance.

    Args:
        strict: Raise on unknown helpers and partials (default: render "")
        no_escape: Disable HTML escaping of variable output
        cache: Cache compiled templates by exact source text

    Attributes:
        helpers: Dict-like registry of ``Helper`` objects
        partials: Dict-like registry of partial source strings
        options: Default ``TemplateOptions`` for compile()/render()

    Example:
        >>> env = Environment(strict=True)
        >>> env.register_helper("shout", lambda s: f"{s}!")
        >>> env.render("{{shout word | uppercase}}", {"word": "hey"})
        'HEY!'

    """

    def __init__(
        self,
        *,
        strict: bool = False,
        no_escape: bool = False,
        cache: bool = True,
    ):
        self.options = TemplateOptions(strict=strict, no_escape=no_escape, cache=cache)
        self._helpers: dict[str, Helper] = dict(DEFAULT_HELPERS)
        self._partials: dict[str, str] = {}
        self.helpers: Registry[Helper] = Registry(self, "_helpers")
        self.partials: Registry[str] = Registry(self, "_partials")
        self._cache = CompilationCache()
        self._renderer = Renderer(self)

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def compile(
        self,
        source: str,
        *,
        name: str | None = None,
        strict: bool | None = None,
        no_escape: bool | None = None,
        cache: bool | None = None,
    ) -> Template:
        """Compile template source, reusing a cached Template when possible.

        Args:
            source: Template text
            name: Name used in error messages
            strict, no_escape, cache: Per-call overrides of the environment
                defaults (None inherits)

        Returns:
            A callable Template. A cache hit returns the cached Template,
            re-bound to this call's name and options if they differ.

        Raises:
            CompileError: A block has no matching end
        """
        opts = self.options.merge(strict=strict, no_escape=no_escape, cache=cache)

        if opts.cache:
            entry = self._cache.get(source)
            if entry is not None:
                logger.debug("cache hit (uses=%d): %r", entry.use_count, _preview(source))
                return entry.template.with_options(opts, name)

        nodes = Parser(tokenize(source), source, name).parse()
        template = Template(self, nodes, source, name, opts)
        logger.debug("compiled template %s (%d nodes): %r", name or "<string>", len(nodes), _preview(source))

        if opts.cache:
            self._cache.put(source, template)
        return template

    def render(
        self,
        source: str,
        context: Any = None,
        *,
        strict: bool | None = None,
        no_escape: bool | None = None,
        cache: bool | None = None,
    ) -> str:
        """Compile ``source`` and render it with ``context`` in one step.

        Example:
            >>> env.render("Hello {{name}}", {"name": "World"})
            'Hello World'

        Raises:
            CompileError: A block has no matching end
            RenderError: A helper failed, a partial recursed into itself, or
                (strict mode) a helper or partial is unknown
        """
        template = self.compile(source, strict=strict, no_escape=no_escape, cache=cache)
        return template(context)

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------

    def register_helper(
        self,
        name: str,
        func: Callable[..., Any] | Helper,
        *,
        block: bool | None = None,
    ) -> None:
        """Register (or overwrite) a helper.

        Args:
            name: Name used in templates
            func: Helper callable
            block: True for a block helper (receives HelperOptions last).
                None reads the ``@block_helper`` marker.
        """
        self.helpers[name] = Helper.wrap(func, block)
        logger.debug("registered helper %r", name)

    def register_helpers(self, helpers: Mapping[str, Callable[..., Any] | Helper]) -> None:
        """Register several helpers at once."""
        self.helpers.update({name: Helper.wrap(func) for name, func in helpers.items()})
        logger.debug("registered %d helpers", len(helpers))

    def register_partial(self, name: str, source: str) -> None:
        """Register (or overwrite) a partial used as ``{{> name}}``."""
        self.partials[name] = source
        logger.debug("registered partial %r", name)

    def register_partials(self, partials: Mapping[str, str]) -> None:
        """Register several partials at once."""
        self.partials.update(partials)
        logger.debug("registered %d partials", len(partials))

    def list_helpers(self) -> list[str]:
        return sorted(self._helpers)

    def list_partials(self) -> list[str]:
        return sorted(self._partials)

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def get_cache_stats(self) -> CacheStats:
        """Size, total use count and average use count of the cache."""
        return self._cache.stats()

    def clear_cache(self) -> None:
        """Drop every cached template."""
        self._cache.clear()
        logger.debug("template cache cleared")

    def __repr__(self) -> str:
        return (
            f"<Environment strict={self.options.strict} no_escape={self.options.no_escape} "
            f"helpers={len(self._helpers)} partials={len(self._partials)} cached={len(self._cache)}>"
        )
