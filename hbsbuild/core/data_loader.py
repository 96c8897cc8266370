# hbsbuild/core/data_loader.py
import json
from pathlib import Path
from typing import Any, Dict
import structlog

from hbsbuild.core.discovery import expand_pattern
from hbsbuild.core.ledger import DependencyLedger

log = structlog.get_logger(__name__)


def read_data_file(file_path: str, ledger: DependencyLedger, data: Dict[str, Any]) -> None:
    # parses one JSON data file into `data` under its stem; the read is tracked even if parsing fails.
    try:
        parsed = json.loads(ledger.read_text(file_path))
    except (UnicodeDecodeError, ValueError) as e:
        log.warning("data_file_not_valid_json_skipped", path=file_path, error=str(e))
        return
    data[Path(file_path).stem] = parsed


def resolve_data(data_option: Any, ledger: DependencyLedger) -> Dict[str, Any]:
    """
    Resolves the configured data source into the render context.

    A string is a glob of JSON files, each contributing one top-level key.
    Any other value is used as the context as-is.
    """
    if isinstance(data_option, str):
        data: Dict[str, Any] = {}
        for file_path in expand_pattern(data_option):
            read_data_file(file_path, ledger, data)
        log.debug("data_files_loaded", pattern=data_option, keys=list(data.keys()))
        return data
    return data_option if data_option is not None else {}
