"""
Append-only leaderboard stored as ``score<TAB>name`` lines
"""

from __future__ import annotations

import unicodedata
import warnings
from typing import List, Optional, Tuple

from .config import LEADERBOARD_CONFIG


def sanitize_name(name: Optional[str]) -> str:
    """Control characters become spaces; truncated; placeholder when empty"""
    name = "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in (name or ""))
    name = name[:LEADERBOARD_CONFIG["max_name_length"]]
    return name or LEADERBOARD_CONFIG["default_name"]


def parse_line(line: str) -> Optional[Tuple[int, str]]:
    line = line.rstrip("\n").rstrip("\r")
    if not line or "\t" not in line:
        return None
    score_part, name = line.split("\t", 1)
    try:
        score = int(score_part)
    except ValueError:
        return None
    return score, name


class Leaderboard:
    """High score file"""

    def __init__(self, path: str = LEADERBOARD_CONFIG["path"]):
        self.path = path

    def record(self, score: int, name: Optional[str]) -> bool:
        """Append one run. Returns False (with a warning) if the file is not writable."""
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(f"{score}\t{sanitize_name(name)}\n")
        except OSError as exc:
            warnings.warn(f"could not write {self.path}: {exc}", RuntimeWarning, stacklevel=2)
            return False
        return True

    def load(self) -> List[Tuple[int, str]]:
        """All valid entries, best first"""
        try:
            with open(self.path, "rb") as f:
                raw_lines = f.readlines()
        except FileNotFoundError:
            return []
        except OSError as exc:
            warnings.warn(f"could not read {self.path}: {exc}", RuntimeWarning, stacklevel=2)
            return []

        entries = []
        for raw in raw_lines:
            # undecodable records are skipped like malformed ones
            try:
                entry = parse_line(raw.decode("utf-8"))
            except UnicodeDecodeError:
                continue
            if entry is not None:
                entries.append(entry)
        return sorted(entries, key=lambda e: e[0], reverse=True)

    def top(self, n: int = LEADERBOARD_CONFIG["top_n"]) -> List[Tuple[int, str]]:
        return self.load()[:n]

    def submit(self, score: int, name: Optional[str]) -> List[Tuple[int, str]]:
        """Record a run and return the refreshed top entries"""
        self.record(score, name)
        return self.top()
