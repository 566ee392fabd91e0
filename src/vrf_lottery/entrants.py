from __future__ import annotations

from typing import List

from .chain import normalize_address


def load_entrants(path: str) -> List[str]:
    """
    One address per line, in join order. Blank lines and ``#`` comments are
    skipped. An address listed twice buys two tickets.
    """
    out: List[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            w = line.strip()
            if not w or w.startswith("#"):
                continue
            out.append(normalize_address(w))
    return out
