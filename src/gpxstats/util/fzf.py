# gpxstats/util/fzf.py
"""
Interactive GPX file selection with `fzf`.

Each candidate is offered as "<label><TAB><absolute path>"; only the label is
shown and searched. The label is the path relative to `root` when one is
given, so files with the same name in different folders stay distinguishable.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from shutil import which
from typing import Optional

from gpxstats.errors import FzfNotFoundError, GPXStatsError

# 1: no match, 130: aborted with Esc / Ctrl-C
_EMPTY_SELECTION_CODES = (1, 130)


def _label(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return path.name


def _parse_selection(out: str) -> list[Path]:
    selected: list[Path] = []
    for line in out.splitlines():
        line = line.strip()
        if not line:
            continue
        path_str = line.split("\t", 1)[1] if "\t" in line else line
        selected.append(Path(path_str).expanduser().resolve())
    return selected


def fzf_select_paths(
        paths: list[Path], *,
        header: str,
        multi: bool = True,
        root: Optional[Path] = None,
) -> list[Path]:
    """Return the GPX files picked in fzf; empty when the user picks nothing."""
    if not which("fzf"):
        raise FzfNotFoundError("fzf not found on PATH. Install fzf or pass GPX files explicitly.")

    input_text = "".join(f"{_label(p, root)}\t{p}\n" for p in paths)

    cmd = [
        "fzf",
        "--delimiter=\t",
        "--with-nth=1",
        "--height=60%",
        "--layout=reverse",
        "--border",
        "--header", header,
    ]
    if multi:
        cmd.append("--multi")

    proc = subprocess.run(
        cmd,
        input=input_text.encode(),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    if proc.returncode in _EMPTY_SELECTION_CODES:
        return []
    if proc.returncode != 0:
        raise GPXStatsError(f"fzf failed: {proc.stderr.decode(errors='replace')}")

    return _parse_selection(proc.stdout.decode())
