# hbsbuild/core/templating/partials.py
from pathlib import Path
from typing import Dict, List, Mapping
import structlog

from hbsbuild.config.settings import PartialSources
from hbsbuild.core.discovery import expand_pattern
from hbsbuild.core.ledger import DependencyLedger
from hbsbuild.core.templating.registry import TemplateRegistry
from hbsbuild.exceptions import ConfigError

log = structlog.get_logger(__name__)


def get_partial_id(file_path: str) -> str:
    # "src/partials/header.hbs" -> "partials/header"
    path = Path(file_path)
    return f"{path.parent.name}/{path.stem}" if path.parent.name else path.stem


def resolve_partials(partials: PartialSources) -> Dict[str, str]:
    """Resolves configured partial sources into a {partial name: file path} map."""
    if not partials:
        return {}
    if isinstance(partials, Mapping):
        return {str(name): str(file_path) for name, file_path in partials.items()}

    patterns: List[str] = [partials] if isinstance(partials, str) else list(partials)
    resolved: Dict[str, str] = {}
    for pattern in patterns:
        if not isinstance(pattern, str):
            raise ConfigError(f"partial pattern must be a string, got {type(pattern).__name__}")
        for file_path in expand_pattern(pattern):
            resolved[get_partial_id(file_path)] = file_path
    log.debug("partials_resolved", count=len(resolved))
    return resolved


def add_partials_map(registry: TemplateRegistry, partials: Mapping[str, str], ledger: DependencyLedger) -> None:
    # reads each partial (tracking it) and registers it, overwriting earlier versions.
    for partial_id, file_path in partials.items():
        registry.register_partial(partial_id, ledger.read_text(file_path))
