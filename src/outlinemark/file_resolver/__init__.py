"""
Gitignore-aware discovery of outline documents.

Usage::

    from outlinemark.file_resolver import FileResolver, FileResolverConfig

    resolver = FileResolver(FileResolverConfig(extend_exclude=["drafts/"]))
    files = resolver.resolve([".", "notes/extra.rfc"])
"""

from outlinemark.file_resolver.resolver import (
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDES,
    FileResolver,
    FileResolverConfig,
    has_glob_chars,
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "DEFAULT_INCLUDES",
    "FileResolver",
    "FileResolverConfig",
    "has_glob_chars",
]
