"""
Renders entry templates: read, compile, render and route each matched file,
passing every intermediate value through the lifecycle hooks.
"""
import asyncio
import os
from pathlib import Path
from typing import Any, Callable, List, Sequence
import structlog

from hbsbuild.config.settings import NAME_TOKEN, LifecycleHooks, OutputTemplate
from hbsbuild.core.discovery import expand_pattern_async
from hbsbuild.core.ledger import DependencyLedger
from hbsbuild.core.output import OutputRouter
from hbsbuild.core.templating import TemplateRegistry

log = structlog.get_logger(__name__)


def strip_extension(file_path: str) -> str:
    root, _ext = os.path.splitext(file_path)
    return root


def get_target_file_path(file_path: str, output_template: OutputTemplate = None) -> str:
    """
    Returns the output path for a template.

    Without an output template the source path minus its extension is used.
    A string template has its "[name]" token replaced with the source file's
    name; a callable receives (name, source path) and its result is used.
    """
    if output_template is None:
        return strip_extension(file_path)

    file_name = Path(file_path).stem

    if callable(output_template):
        return output_template(file_name, file_path)

    return output_template.replace(NAME_TOKEN, file_name)


class TemplateCompiler:
    def __init__(
        self,
        registry: TemplateRegistry,
        ledger: DependencyLedger,
        router: OutputRouter,
        hooks: LifecycleHooks,
        output_template: OutputTemplate = None,
    ):
        self.registry = registry
        self.ledger = ledger
        self.router = router
        self.hooks = hooks
        self.output_template = output_template

    def compile_entry_file(self, source_path: str, output_path: str, data: Any) -> str:
        target_file_path = get_target_file_path(source_path, self.output_template)

        template_content = self.ledger.read_text(source_path)
        template_content = self.hooks.on_before_compile(self.registry, template_content) or template_content
        template = self.registry.compile(template_content)
        render_data = self.hooks.on_before_render(self.registry, data) or data
        result = self.registry.render(template, render_data)
        result = self.hooks.on_before_save(self.registry, result, target_file_path) or result

        final_path = self.router.route(target_file_path, result, output_path)

        self.hooks.on_done(self.registry, final_path)
        log.info("created_output", path=_display_path(final_path))
        return final_path

    async def compile_pattern(self, entry_pattern: str, output_path: str, get_data: Callable[[], Any]) -> List[str]:
        entry_files = await expand_pattern_async(entry_pattern)
        if not entry_files:
            log.warning("no_entry_files_found_for_pattern", pattern=entry_pattern)
            return []
        # files of one pattern are rendered in order, one at a time
        return [self.compile_entry_file(fp, output_path, get_data()) for fp in entry_files]

    async def compile_all(self, entry_patterns: Sequence[str], output_path: str, get_data: Callable[[], Any]) -> List[str]:
        results = await asyncio.gather(
            *[self.compile_pattern(p, output_path, get_data) for p in entry_patterns]
        )
        return [target for per_pattern in results for target in per_pattern]


def _display_path(file_path: str) -> str:
    cwd_prefix = os.getcwd() + os.sep
    return file_path[len(cwd_prefix):] if file_path.startswith(cwd_prefix) else file_path
