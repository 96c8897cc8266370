"""
The host build interface the pipeline plugs into, plus StandaloneBuild, a
minimal host that runs passes in-process and writes collected assets to disk.
"""
import asyncio
import inspect
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union
import structlog

from hbsbuild.core.output import PendingAsset, write_to_file

log = structlog.get_logger(__name__)

HOOK_NAMES = ("make", "emit", "page_generated")

HookCallback = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass
class Compilation:
    # state of one build pass as seen by plugins.
    output_path: str
    file_timestamps: Mapping[str, Any] = field(default_factory=dict)
    file_dependencies: Set[str] = field(default_factory=set)
    assets: Dict[str, PendingAsset] = field(default_factory=dict)


@dataclass
class PageData:
    # a page fragment produced by a companion page-generation plugin.
    output_name: str
    html: str
    template: Optional[str] = None


class BuildHooks:
    """Ordered tap points; callbacks may be plain functions or coroutines."""

    def __init__(self):
        self._taps: Dict[str, List[Tuple[str, HookCallback]]] = {name: [] for name in HOOK_NAMES}

    def tap(self, hook_name: str, plugin_name: str, callback: HookCallback) -> None:
        if hook_name not in self._taps:
            raise KeyError(f"unknown build hook '{hook_name}'")
        self._taps[hook_name].append((plugin_name, callback))

    def taps(self, hook_name: str) -> List[str]:
        return [plugin_name for plugin_name, _ in self._taps[hook_name]]

    async def call(self, hook_name: str, *args: Any) -> None:
        for plugin_name, callback in self._taps[hook_name]:
            log.debug("calling_build_hook", hook=hook_name, plugin=plugin_name)
            result = callback(*args)
            if inspect.isawaitable(result):
                await result

    async def call_waterfall(self, hook_name: str, value: Any) -> Any:
        # each callback receives the previous one's return value.
        for _plugin_name, callback in self._taps[hook_name]:
            result = callback(value)
            if inspect.isawaitable(result):
                result = await result
            value = result if result is not None else value
        return value


@dataclass
class BuildResult:
    written_files: List[Path]
    file_dependencies: List[str]


def stat_timestamps(file_paths: Iterable[str]) -> Dict[str, Optional[float]]:
    timestamps: Dict[str, Optional[float]] = {}
    for file_path in file_paths:
        try:
            timestamps[file_path] = os.stat(file_path).st_mtime
        except FileNotFoundError:
            timestamps[file_path] = None
    return timestamps


class StandaloneBuild:
    """
    Runs build passes without an external bundler.

    Each pass reports the modification times of the previous pass's file
    dependencies, runs the make and emit hooks, then writes every collected
    asset beneath the output path.
    """

    def __init__(self, output_path: Union[str, Path], plugins: Iterable[Any] = ()):
        self.output_path = Path(output_path).resolve()
        self.hooks = BuildHooks()
        self.file_dependencies: Set[str] = set()
        for plugin in plugins:
            plugin.apply(self)

    async def run_async(self, pages: Iterable[PageData] = ()) -> BuildResult:
        compilation = Compilation(
            output_path=str(self.output_path),
            file_timestamps=stat_timestamps(sorted(self.file_dependencies)),
        )
        for page in pages:
            await self.hooks.call_waterfall("page_generated", page)
        await self.hooks.call("make", compilation)
        await self.hooks.call("emit", compilation)

        written: List[Path] = []
        for asset_name, asset in sorted(compilation.assets.items()):
            target = self.output_path / asset_name
            write_to_file(target, asset.source())
            written.append(target)

        self.file_dependencies = set(compilation.file_dependencies)
        log.info("standalone_build_pass_complete", written=len(written), dependencies=len(self.file_dependencies))
        return BuildResult(written_files=written, file_dependencies=sorted(self.file_dependencies))

    def run(self, pages: Iterable[PageData] = ()) -> BuildResult:
        return asyncio.run(self.run_async(pages))
