"""Curly environment: the engine object, its registries, cache and errors."""

from curly.environment.exceptions import (
    CompileError,
    ErrorCode,
    RenderError,
    SourceSnippet,
    TemplateError,
    UnknownHelperError,
    UnknownPartialError,
    build_source_snippet,
)
from curly.environment.cache import CacheEntry, CacheStats, CompilationCache
from curly.environment.core import Environment
from curly.environment.helpers import DEFAULT_HELPERS
from curly.environment.options import TemplateOptions
from curly.environment.registry import Helper, HelperKind, Registry, block_helper

__all__ = [
    "DEFAULT_HELPERS",
    "CacheEntry",
    "CacheStats",
    "CompilationCache",
    "CompileError",
    "Environment",
    "ErrorCode",
    "Helper",
    "HelperKind",
    "Registry",
    "RenderError",
    "SourceSnippet",
    "TemplateError",
    "TemplateOptions",
    "UnknownHelperError",
    "UnknownPartialError",
    "block_helper",
    "build_source_snippet",
]
