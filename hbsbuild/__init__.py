"""hbsbuild: incremental Handlebars rendering for asset builds."""

__version__ = "0.3.0"

from hbsbuild.config.settings import LifecycleHooks, PageIntegrationOptions, PluginConfig
from hbsbuild.core.host import Compilation, PageData, StandaloneBuild
from hbsbuild.core.pipeline import HandlebarsPipeline
from hbsbuild.core.templating import TemplateRegistry

__all__ = [
    "__version__",
    "Compilation",
    "HandlebarsPipeline",
    "LifecycleHooks",
    "PageData",
    "PageIntegrationOptions",
    "PluginConfig",
    "StandaloneBuild",
    "TemplateRegistry",
]
