from __future__ import annotations

import json
import os
import time
import uuid
from pathlib import Path
from typing import Any


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def job_suffix() -> str:
    # Millisecond timestamp plus a short random tail; two requests landing in
    # the same millisecond still get distinct names.
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def env_str(name: str, default: str = "") -> str:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip()


def env_int(name: str, default: int, min_value: int | None = None, max_value: int | None = None) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        x = default
    else:
        try:
            x = int(v.strip())
        except ValueError:
            x = default
    if min_value is not None:
        x = max(min_value, x)
    if max_value is not None:
        x = min(max_value, x)
    return x


def env_float(name: str, default: float, min_value: float | None = None, max_value: float | None = None) -> float:
    v = os.getenv(name)
    if v is None or not v.strip():
        x = default
    else:
        try:
            x = float(v.strip())
        except ValueError:
            x = default
    if min_value is not None:
        x = max(min_value, x)
    if max_value is not None:
        x = min(max_value, x)
    return x


def parse_clock_times(s: str) -> list[tuple[int, int]]:
    """Parse ``"09:00,18:30"`` into ``[(9, 0), (18, 30)]``, skipping bad entries."""
    out: list[tuple[int, int]] = []
    for part in (s or "").split(","):
        p = part.strip()
        if not p or ":" not in p:
            continue
        hh, mm = p.split(":", 1)
        try:
            h, m = int(hh), int(mm)
        except ValueError:
            continue
        if 0 <= h <= 23 and 0 <= m <= 59:
            out.append((h, m))
    return sorted(set(out))
