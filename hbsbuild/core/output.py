import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict
import structlog

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PendingAsset:
    # lazily evaluated in-memory output, picked up by the host build.
    source: Callable[[], str]
    size: Callable[[], int]

    @classmethod
    def from_text(cls, content: str) -> "PendingAsset":
        return cls(source=lambda: content, size=lambda: len(content.encode("utf-8")))


def is_within_directory(target_path: str, directory: str) -> bool:
    # strictly inside; the directory itself is not a file it contains.
    target = os.path.abspath(target_path)
    root = os.path.abspath(directory)
    try:
        return target != root and os.path.commonpath([target, root]) == root
    except ValueError:
        # different drives on windows
        return False


def write_to_file(output_file_path: Path, text_content: str):
    # writes text content to the specified path, creating parent directories.
    log.debug("writing_output_to_file", path=str(output_file_path))
    output_file_path.parent.mkdir(parents=True, exist_ok=True)
    output_file_path.write_text(text_content, encoding="utf-8")


class OutputRouter:
    """
    Delivers rendered output either as a pending asset (target inside the
    host's output directory) or as a direct file write (target outside it).
    """

    def __init__(self):
        self.pending_assets: Dict[str, PendingAsset] = {}

    def clear(self) -> None:
        self.pending_assets = {}

    def route(self, target_path: str, content: str, output_root: str) -> str:
        if is_within_directory(target_path, output_root):
            relative_name = os.path.relpath(os.path.abspath(target_path), os.path.abspath(output_root))
            relative_name = relative_name.replace(os.sep, "/").lstrip("/")
            self.pending_assets[relative_name] = PendingAsset.from_text(content)
            log.debug("output_registered_as_pending_asset", asset=relative_name)
            return relative_name

        # outside the managed output directory: no live-reload support
        write_to_file(Path(target_path), content)
        return target_path
