# hbsbuild/core/discovery/__init__.py
"""
Glob expansion for entry templates, data files, partials and helper modules.
"""
from .pattern_matching import expand_pattern, split_static_base
from .entries import expand_pattern_async

__all__ = ["expand_pattern", "split_static_base", "expand_pattern_async"]
