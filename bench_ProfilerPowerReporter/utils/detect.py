# bench_ProfilerPowerReporter/utils/detect.py
from __future__ import annotations
from pathlib import Path
import re

from ..core.errors import PathError
from ..core.model import InputFile

CAPTURE_SUFFIX = ".json"


def _natural_key(p: Path) -> list:
    # iteration 10 sorts after iteration 2
    return [int(tok) if tok.isdigit() else tok for tok in re.split(r"(\d+)", str(p))]


def is_capture(p: Path) -> bool:
    return p.is_file() and p.suffix.lower() == CAPTURE_SUFFIX


def discover_inputs(root: Path | str, recurse: bool = False) -> list[InputFile]:
    """
    If 'root' is a file -> return that one capture (must be .json).
    If 'root' is a folder -> collect its .json captures (optionally recursively).
    Raises PathError when nothing usable is found.
    """
    root = Path(root).expanduser().resolve()
    if not root.exists():
        raise PathError(f"Incorrect path - does not exist: {root}")

    if root.is_file():
        if not is_capture(root):
            raise PathError(f"Path does not point to a json file: {root}")
        return [InputFile(name=root.name, path=root)]

    if not root.is_dir():
        raise PathError(f"Path does not point to a file or folder: {root}")

    it = root.rglob("*") if recurse else root.glob("*")
    items = [InputFile(name=p.name, path=p) for p in it if is_capture(p)]
    if not items:
        raise PathError(f"Folder does not contain any json files: {root}")

    # deterministic ordering
    items.sort(key=lambda x: _natural_key(x.path))
    return items
