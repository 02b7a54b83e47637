"""Render options shared by Environment defaults and per-call overrides."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class TemplateOptions:
    """Options controlling compilation and rendering.

    Attributes:
        strict: Raise UnknownHelperError/UnknownPartialError instead of
            rendering an empty string
        no_escape: Disable HTML escaping for every variable in the render
        cache: Store and reuse compiled templates keyed by exact source
    """

    strict: bool = False
    no_escape: bool = False
    cache: bool = True

    def merge(
        self,
        *,
        strict: bool | None = None,
        no_escape: bool | None = None,
        cache: bool | None = None,
    ) -> TemplateOptions:
        """Return options with the given overrides applied; None inherits."""
        changes = {
            key: value
            for key, value in (("strict", strict), ("no_escape", no_escape), ("cache", cache))
            if value is not None
        }
        return replace(self, **changes) if changes else self
