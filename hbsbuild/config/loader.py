# hbsbuild/config/loader.py
"""
Handles locating and loading build configuration from TOML files.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
import structlog

from hbsbuild.exceptions import ConfigError

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".hbsbuild.toml", "hbsbuild.toml", "pyproject.toml"]


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}") from e
    return data.get("tool", {}).get("hbsbuild", {}) if file_path.name == "pyproject.toml" else data


def find_project_config(search_dir: Optional[Path] = None) -> Optional[Path]:
    base = search_dir or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base / filename
        if not candidate.is_file():
            continue
        if filename == "pyproject.toml" and not _load_toml_file_data(candidate):
            continue
        return candidate
    return None


def load_config_file(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Loads the explicit config file, or the first project config found in the working directory."""
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"config file not found: {config_path}")
        log.info("loading_explicit_config", path=str(config_path))
        return _load_toml_file_data(config_path)

    found = find_project_config()
    if found is None:
        log.debug("no_configuration_files_loaded")
        return {}
    log.info("loading_project_local_config", path=str(found))
    return _load_toml_file_data(found)
