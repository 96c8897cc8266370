"""
Resolves configured Handlebars helpers.

A helper entry maps a name to either a callable or a glob pattern of Python
modules. Each module found by a pattern contributes the callable named after
its file (``format_date.py`` or ``format_date.helper.py`` -> ``format_date``).
"""
import importlib.util
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional
import structlog

from hbsbuild.core.discovery import expand_pattern
from hbsbuild.exceptions import HelperError

log = structlog.get_logger(__name__)


@dataclass
class ResolvedHelper:
    helper_id: str
    helper_function: Callable[..., Any]
    file_path: Optional[str] = None


def get_helper_id(file_path: str) -> str:
    name = Path(file_path).name
    return name.split(".", 1)[0]


def load_helper_module(file_path: str) -> Callable[..., Any]:
    helper_id = get_helper_id(file_path)
    spec = importlib.util.spec_from_file_location(f"hbsbuild_helper_{helper_id}", file_path)
    if spec is None or spec.loader is None:
        raise HelperError(f"cannot load helper module '{file_path}'")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    helper_function = getattr(module, helper_id, None)
    if not callable(helper_function):
        raise HelperError(f"helper module '{file_path}' does not define a callable named '{helper_id}'")
    return helper_function


def resolve_helpers(helpers: Mapping[str, Any]) -> List[ResolvedHelper]:
    resolved: List[ResolvedHelper] = []
    for helper_id, value in helpers.items():
        if callable(value):
            resolved.append(ResolvedHelper(helper_id, value))
            continue
        if not isinstance(value, str):
            raise HelperError(f"helper '{helper_id}' must be a callable or a glob pattern of helper modules")
        matches = expand_pattern(value)
        if not matches:
            log.warning("no_helper_modules_found", helper=helper_id, pattern=value)
        for file_path in matches:
            resolved.append(ResolvedHelper(get_helper_id(file_path), load_helper_module(file_path), file_path))
    log.debug("helpers_resolved", ids=[h.helper_id for h in resolved])
    return resolved
