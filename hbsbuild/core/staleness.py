"""
Decides whether a build pass needs to recompile, by comparing the host's
reported file timestamps against the previous snapshot and the ledger.
"""
import math
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Protocol
import structlog

from hbsbuild.core.ledger import DependencyLedger

log = structlog.get_logger(__name__)


class TimestampSource(Protocol):
    def keys(self) -> Iterable[str]: ...
    def get(self, key: str) -> Optional[float]: ...


class MappingTimestamps:
    # host reports a flat path -> timestamp mapping.
    def __init__(self, timestamps: Mapping[str, Optional[float]]):
        self._timestamps = timestamps

    def keys(self) -> Iterable[str]:
        return list(self._timestamps.keys())

    def get(self, key: str) -> Optional[float]:
        return self._timestamps.get(key)


class FileInfoTimestamps:
    # host reports path -> info record, with the time under `timestamp` or `safe_time`.
    def __init__(self, file_infos: Mapping[str, Any]):
        self._file_infos = file_infos

    def keys(self) -> Iterable[str]:
        return list(self._file_infos.keys())

    def get(self, key: str) -> Optional[float]:
        info = self._file_infos.get(key)
        if info is None:
            return None
        for attr in ("timestamp", "safe_time"):
            value = info.get(attr) if isinstance(info, Mapping) else getattr(info, attr, None)
            if value is not None:
                return value
        return None


def as_timestamp_source(file_timestamps: Any) -> TimestampSource:
    """Wraps whatever the host reported in the matching adapter."""
    if file_timestamps is None:
        return MappingTimestamps({})
    if isinstance(file_timestamps, (MappingTimestamps, FileInfoTimestamps)):
        return file_timestamps
    if not isinstance(file_timestamps, Mapping):
        raise TypeError(f"unsupported file timestamp container: {type(file_timestamps).__name__}")
    # deleted files may be reported as None; sample the first real record
    sample = next((v for v in file_timestamps.values() if v is not None), None)
    if sample is None or isinstance(sample, (int, float)):
        return MappingTimestamps(file_timestamps)
    return FileInfoTimestamps(file_timestamps)


def should_rebuild(
    current_timestamps: TimestampSource,
    ledger: DependencyLedger,
    previous_snapshot: MutableMapping[str, Optional[float]],
    build_start_time: float,
) -> bool:
    """
    Returns True when the pass has to recompile.

    A file counts as changed when its previous timestamp (or the build start
    time, if unseen) is older than its current one (missing current
    timestamps count as infinitely new). The snapshot is updated for every
    reported file. No changes at all also rebuilds, so the first pass and
    hosts that report nothing never skip.
    """
    changed_files: List[str] = []
    for file_path in current_timestamps.keys():
        previous = previous_snapshot.get(file_path)
        current = current_timestamps.get(file_path)
        previous_snapshot[file_path] = current
        if (previous or build_start_time) < (current or math.inf):
            changed_files.append(file_path)

    if not changed_files:
        log.debug("no_changed_files_reported_rebuilding")
        return True

    rebuild = ledger.contains_any(changed_files)
    log.debug("changed_files_checked_against_ledger", changed=len(changed_files), rebuild=rebuild)
    return rebuild


class StalenessDetector:
    """Holds the timestamp snapshot and build start time for one pipeline."""

    def __init__(self, build_start_time: float):
        self.build_start_time = build_start_time
        self.previous_snapshot: Dict[str, Optional[float]] = {}

    def check(self, file_timestamps: Any, ledger: DependencyLedger) -> bool:
        return should_rebuild(
            as_timestamp_source(file_timestamps), ledger, self.previous_snapshot, self.build_start_time
        )
