from __future__ import annotations

import json
import random
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from brainbender.errors import MissingAssetError, RenderError
from brainbender.utils import load_json


@dataclass(frozen=True)
class Riddle:
    question: str
    answer: str

    @property
    def combined_text(self) -> str:
        return f"{self.question}\n\nAnswer: {self.answer}"


def load_riddles(path: Path) -> list[Riddle]:
    if not path.exists():
        raise MissingAssetError(f"Riddle dataset not found: {path}")
    try:
        raw = load_json(path)
    except json.JSONDecodeError as e:
        raise RenderError(f"Riddle dataset is not valid JSON: {path}: {e}") from e
    if not isinstance(raw, list):
        raise RenderError(f"Riddle dataset must be a JSON list: {path}")

    out: list[Riddle] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise RenderError(f"Riddle #{idx} is not an object")
        q = str(item.get("question") or "").strip()
        a = str(item.get("answer") or "").strip()
        if not q or not a:
            raise RenderError(f"Riddle #{idx} needs both a question and an answer")
        out.append(Riddle(question=q, answer=a))

    logger.info(f"[Riddles] Loaded {len(out)} riddles from {path}")
    return out


def pick_riddle(riddles: list[Riddle], rng: random.Random) -> Riddle:
    if not riddles:
        raise RenderError("Riddle list is empty")
    return riddles[rng.randrange(len(riddles))]
