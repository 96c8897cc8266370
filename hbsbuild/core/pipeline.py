# hbsbuild/core/pipeline.py
import time
from typing import Any, Dict, List, Optional

import structlog

from hbsbuild.config.settings import PluginConfig
from hbsbuild.core.compiler import TemplateCompiler
from hbsbuild.core.data_loader import resolve_data
from hbsbuild.core.host import Compilation, PageData
from hbsbuild.core.ledger import DependencyLedger
from hbsbuild.core.output import OutputRouter, PendingAsset
from hbsbuild.core.pages import register_generated_page
from hbsbuild.core.staleness import StalenessDetector
from hbsbuild.core.templating import TemplateRegistry, add_partials_map, resolve_helpers, resolve_partials
from hbsbuild.logging_setup import enable_verbose_logging

log = structlog.get_logger(__name__)

PLUGIN_NAME = "HandlebarsPipeline"


class HandlebarsPipeline:
    # orchestrates staleness checks, partial refresh, compilation and emission for one host build.
    def __init__(self, config: PluginConfig, registry: Optional[TemplateRegistry] = None):
        self.config: PluginConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        if config.log:
            enable_verbose_logging()

        self.registry = registry if registry is not None else TemplateRegistry()
        self.hooks = config.hooks
        self.hooks.on_before_setup(self.registry)

        self.ledger = DependencyLedger()
        self.router = OutputRouter()
        self.compiler = TemplateCompiler(self.registry, self.ledger, self.router, self.hooks, config.output)
        self.data: Any = {}
        self.update_data()
        self.staleness = StalenessDetector(build_start_time=time.time())

        for helper in resolve_helpers(config.helpers):
            self.registry.register_helper(helper.helper_id, helper.helper_function)
            self.ledger.add(helper.file_path)

    @property
    def pending_assets(self) -> Dict[str, PendingAsset]:
        return self.router.pending_assets

    def update_data(self):
        # (re)loads the render context; data files are tracked by the ledger.
        self.data = resolve_data(self.config.data, self.ledger)

    def load_partials(self):
        partials = resolve_partials(self.config.partials)
        partials = self.hooks.on_before_add_partials(self.registry, partials) or partials
        add_partials_map(self.registry, partials, self.ledger)
        self.log.debug("partials_registered", count=len(partials))

    def dependencies_updated(self, compilation: Compilation) -> bool:
        return self.staleness.check(compilation.file_timestamps, self.ledger)

    async def compile_all_entry_files(self, output_path: str) -> List[str]:
        self.router.clear()
        self.update_data()
        created = await self.compiler.compile_all(self.config.entry_patterns, output_path, lambda: self.data)
        self.log.info("compilation_pass_complete", outputs=len(created))
        return created

    async def compile(self, compilation: Compilation) -> bool:
        # make stage: returns False when the pass was skipped.
        if not self.dependencies_updated(compilation):
            self.log.debug("no_tracked_dependency_changed_skipping_pass")
            return False
        self.load_partials()
        await self.compile_all_entry_files(str(compilation.output_path))
        return True

    def emit_dependencies(self, compilation: Compilation):
        # registers tracked files with the host and hands over pending outputs.
        compilation.file_dependencies.update(self.ledger)
        self.emit_generated_files(compilation)

    def emit_generated_files(self, compilation: Compilation):
        for file_name, asset in self.router.pending_assets.items():
            compilation.assets[file_name] = asset

    def register_page(self, page: PageData) -> PageData:
        return register_generated_page(self.registry, self.ledger, self.config.html_pages.prefix, page)

    def apply(self, host: Any):
        """Taps into the host's build hooks."""
        if self.config.html_pages.enabled:
            async def compile_then_emit(compilation: Compilation):
                await self.compile(compilation)
                self.emit_dependencies(compilation)

            # pages must be registered as partials before anything renders
            host.hooks.tap("page_generated", PLUGIN_NAME, self.register_page)
            host.hooks.tap("emit", PLUGIN_NAME, compile_then_emit)
        else:
            host.hooks.tap("make", PLUGIN_NAME, self.compile)
            host.hooks.tap("emit", PLUGIN_NAME, self.emit_dependencies)
