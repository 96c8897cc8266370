# hbsbuild/core/templating/__init__.py
"""
Templating module for hbsbuild.

Provides the TemplateRegistry that compiles and renders Handlebars templates,
plus partial and helper resolution.
"""
from .registry import TemplateRegistry, Namespace
from .partials import resolve_partials, add_partials_map, get_partial_id
from .helpers import resolve_helpers, ResolvedHelper

__all__ = [
    "TemplateRegistry",
    "Namespace",
    "resolve_partials",
    "add_partials_map",
    "get_partial_id",
    "resolve_helpers",
    "ResolvedHelper",
]
