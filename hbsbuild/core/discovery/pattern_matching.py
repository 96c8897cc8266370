# hbsbuild/core/discovery/pattern_matching.py
import os
from pathlib import Path, PurePosixPath
from typing import List, Optional, Tuple
import pathspec
import structlog

log = structlog.get_logger(__name__)

GLOB_CHARS = set("*?[")


def split_static_base(pattern: str) -> Tuple[str, str]:
    # splits a glob into its leading literal directory and the wildcard remainder.
    # "templates/**/*.hbs" -> ("templates", "**/*.hbs")
    parts = PurePosixPath(pattern.replace(os.sep, "/")).parts
    base_parts: List[str] = []
    for i, part in enumerate(parts):
        if any(ch in GLOB_CHARS for ch in part):
            return (str(Path(*base_parts)) if base_parts else "", "/".join(parts[i:]))
        base_parts.append(part)
    # no wildcard at all: a literal file path
    return (str(Path(*base_parts[:-1])) if len(base_parts) > 1 else "", parts[-1] if parts else "")


def compile_glob_to_spec(segment_glob: str) -> pathspec.PathSpec:
    # anchored single-segment rule; matched only against names without a slash,
    # so git-wildmatch directory semantics never apply.
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, ["/" + segment_glob])


def compile_glob(relative_glob: str) -> List[Optional[pathspec.PathSpec]]:
    # one spec per path segment; None stands for a "**" segment.
    segments = [s for s in relative_glob.strip("/").split("/") if s]
    return [None if s == "**" else compile_glob_to_spec(s) for s in segments]


def match_segments(globs: List[Optional[pathspec.PathSpec]], parts: List[str]) -> bool:
    """Matches path segments against compiled glob segments; "**" spans zero or more."""
    if not globs:
        return not parts
    head, rest = globs[0], globs[1:]
    if head is None:
        return any(match_segments(rest, parts[i:]) for i in range(len(parts) + 1))
    return bool(parts) and bool(head.match_file(parts[0])) and match_segments(rest, parts[1:])


def expand_pattern(pattern: str) -> List[str]:
    """
    Expands a glob pattern into a sorted list of matching file paths.

    Paths are returned in the form of the pattern: a relative pattern yields
    paths relative to the working directory, an absolute one absolute paths.
    A pattern only matches a file by its own path: "*" never reaches into
    subdirectories and only "**" crosses them.
    """
    base, remainder = split_static_base(pattern)
    walk_root = Path(base) if base else Path(".")

    if not any(ch in GLOB_CHARS for ch in remainder):
        candidate = walk_root / remainder
        return [str(candidate) if base else remainder] if candidate.is_file() else []

    if not walk_root.is_dir():
        log.debug("glob_base_directory_missing", pattern=pattern, base=str(walk_root))
        return []

    globs = compile_glob(remainder)
    matches: List[str] = []
    for root, dirs, files in os.walk(str(walk_root), topdown=True):
        dirs.sort()
        for file_name in files:
            file_path = Path(root, file_name)
            rel_path = file_path.relative_to(walk_root).as_posix()
            if match_segments(globs, rel_path.split("/")):
                matches.append(str(Path(base, rel_path)) if base else rel_path)

    matches.sort()
    log.debug("glob_expanded", pattern=pattern, count=len(matches))
    return matches
