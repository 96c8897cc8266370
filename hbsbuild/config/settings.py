from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
import structlog

from hbsbuild.exceptions import ConfigError

log = structlog.get_logger(__name__)

OutputTemplate = Union[None, str, Callable[[str, str], str]]
PartialSources = Union[None, str, List[str], Mapping[str, str]]

NAME_TOKEN = "[name]"


def _noop(*args: Any) -> None:
    return None


@dataclass
class LifecycleHooks:
    # extension points invoked in declaration order across a pass.
    # a truthy return value replaces the value flowing through that stage.
    on_before_setup: Callable[..., Any] = _noop
    on_before_add_partials: Callable[..., Any] = _noop
    on_before_compile: Callable[..., Any] = _noop
    on_before_render: Callable[..., Any] = _noop
    on_before_save: Callable[..., Any] = _noop
    on_done: Callable[..., Any] = _noop

    @classmethod
    def from_mapping(cls, hooks: Optional[Mapping[str, Any]]) -> "LifecycleHooks":
        if not hooks:
            return cls()
        unknown = set(hooks) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"unknown lifecycle hook(s): {', '.join(sorted(unknown))}")
        resolved: Dict[str, Callable[..., Any]] = {}
        for name, fn in hooks.items():
            if fn is None:
                continue
            if not callable(fn):
                raise ConfigError(f"lifecycle hook '{name}' must be callable, got {type(fn).__name__}")
            resolved[name] = fn
        return cls(**resolved)


@dataclass
class PageIntegrationOptions:
    # companion page-generation plugin support.
    enabled: bool = False
    prefix: str = "html"


@dataclass
class PluginConfig:
    # holds all configuration for one pipeline instance.
    entry: Union[str, List[str]]
    output: OutputTemplate = None
    data: Any = field(default_factory=dict)
    partials: PartialSources = None
    helpers: Dict[str, Any] = field(default_factory=dict)
    html_pages: PageIntegrationOptions = field(default_factory=PageIntegrationOptions)
    log: bool = False
    hooks: LifecycleHooks = field(default_factory=LifecycleHooks)

    def __post_init__(self):
        if not self.entry:
            raise ConfigError("'entry' is required: a glob pattern or a list of glob patterns.")
        if not isinstance(self.entry, (str, list, tuple)):
            raise ConfigError(f"'entry' must be a string or list of strings, got {type(self.entry).__name__}")
        if self.output is not None and not (isinstance(self.output, str) or callable(self.output)):
            raise ConfigError("'output' must be a string template or a callable.")
        if not isinstance(self.helpers, Mapping):
            raise ConfigError("'helpers' must map helper names to callables or glob patterns.")
        if isinstance(self.html_pages, Mapping):
            self.html_pages = PageIntegrationOptions(**self.html_pages)
        if isinstance(self.hooks, Mapping):
            self.hooks = LifecycleHooks.from_mapping(self.hooks)

    @property
    def entry_patterns(self) -> List[str]:
        return [self.entry] if isinstance(self.entry, str) else list(self.entry)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "PluginConfig":
        # builds a config from plain (e.g. toml-loaded) values.
        known = {"entry", "output", "data", "partials", "helpers", "html_pages", "log", "hooks"}
        unknown = set(raw) - known
        if unknown:
            log.warning("unknown_config_keys_ignored", keys=sorted(unknown))
        options = {k: v for k, v in raw.items() if k in known}
        html_pages = options.get("html_pages")
        if html_pages is not None and not isinstance(html_pages, (Mapping, PageIntegrationOptions)):
            raise ConfigError("'html_pages' must be a table with 'enabled' and 'prefix'.")
        if isinstance(html_pages, Mapping):
            unknown_page_keys = set(html_pages) - {"enabled", "prefix"}
            if unknown_page_keys:
                raise ConfigError(f"unknown html_pages option(s): {', '.join(sorted(unknown_page_keys))}")
        if "entry" not in options:
            raise ConfigError("'entry' is required: a glob pattern or a list of glob patterns.")
        return cls(**options)


@dataclass
class BuildSettings:
    # settings for a standalone build run from the command line.
    plugin: PluginConfig
    output_path: Path = field(default_factory=lambda: Path("dist"))

    def __post_init__(self):
        self.output_path = Path(self.output_path).resolve()
