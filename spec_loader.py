"""Filesystem helpers selecting the Jasmine spec files to run."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

from exceptions import SpecLoadError

SPEC_FILE_PATTERN = re.compile(r"_spec\.(js|coffee|js\.coffee)$")


def is_spec_file(path: str) -> bool:
    """Check that the path names an existing Jasmine spec file."""
    return bool(SPEC_FILE_PATTERN.search(path)) and Path(path).is_file()


def clean_paths(paths: Iterable[str], spec_dir: str) -> List[str]:
    """
    Reduce changed paths to the targets worth running.

    Duplicates are dropped keeping the first occurrence. When the spec
    directory is among the paths every suite runs anyway, so it is returned
    alone; otherwise only existing spec files are kept.
    """
    unique: List[str] = []
    for path in paths:
        path = str(path).rstrip("/") or str(path)
        if path and path not in unique:
            unique.append(path)

    spec_dir = spec_dir.rstrip("/") or spec_dir
    if spec_dir in unique:
        return [spec_dir]

    return [path for path in unique if is_spec_file(path)]


def discover_specs(spec_dir: str) -> List[str]:
    """List all spec files below the spec directory."""
    root = Path(spec_dir)

    if not root.is_dir():
        raise SpecLoadError(f"Spec directory does not exist: {spec_dir}", path=spec_dir)

    return sorted(
        str(path) for path in root.rglob("*")
        if path.is_file() and SPEC_FILE_PATTERN.search(path.name)
    )
