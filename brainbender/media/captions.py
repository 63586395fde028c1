from __future__ import annotations

import random
import textwrap
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from brainbender.errors import MissingAssetError
from brainbender.media.filters import Caption, FilterChain
from brainbender.riddles import Riddle

SUPPORTED_EXTS = {".jpg", ".jpeg", ".png", ".webp"}

TITLE_COLOR = "0xFFDC32"
DIGIT_COLOR = "0xFFDC32"
ANSWER_COLOR = "0x39FF14"
AVG_GLYPH_RATIO = 0.55


@dataclass(frozen=True)
class CaptionLayout:
    width: int
    height: int
    question_seconds: float
    countdown_seconds: int
    answer_seconds: float
    font_size: int
    margin: int
    channel_title: str
    cta_text: str

    @property
    def reveal_at(self) -> float:
        return self.question_seconds + float(self.countdown_seconds)

    @property
    def total_seconds(self) -> float:
        return self.reveal_at + self.answer_seconds


def pick_background(backgrounds_dir: Path, rng: random.Random) -> Path:
    if not backgrounds_dir.is_dir():
        raise MissingAssetError(f"Backgrounds directory not found: {backgrounds_dir}")
    files = sorted(p for p in backgrounds_dir.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTS)
    if not files:
        raise MissingAssetError(f"No background images in {backgrounds_dir}")
    return rng.choice(files)


def _wrap(text: str, font_size: int, layout: CaptionLayout) -> str:
    usable = max(1, layout.width - 2 * layout.margin)
    chars = max(8, int(usable / (font_size * AVG_GLYPH_RATIO)))
    return "\n".join(textwrap.wrap(text, width=chars)) or text


def caption_timeline(riddle: Riddle, layout: CaptionLayout) -> list[Caption]:
    q_end = layout.reveal_at
    total = layout.total_seconds
    fs = layout.font_size

    captions = [
        Caption(
            text=layout.channel_title,
            start=0.0,
            end=total,
            font_size=int(fs * 0.85),
            color=TITLE_COLOR,
            y="h*0.10",
        ),
        Caption(
            text=_wrap(riddle.question, fs, layout),
            start=0.0,
            end=q_end,
            font_size=fs,
            y="h*0.30",
            box=True,
        ),
    ]

    for i in range(layout.countdown_seconds):
        st = layout.question_seconds + float(i)
        captions.append(
            Caption(
                text=str(layout.countdown_seconds - i),
                start=st,
                end=st + 1.0,
                font_size=int(fs * 2.5),
                color=DIGIT_COLOR,
                y="h*0.68",
            )
        )

    answer_fs = int(fs * 1.3)
    captions.append(
        Caption(
            text=_wrap(f"Answer: {riddle.answer}", answer_fs, layout),
            start=q_end,
            end=total,
            font_size=answer_fs,
            color=ANSWER_COLOR,
            y="h*0.42",
            box=True,
        )
    )
    if layout.cta_text:
        cta_fs = int(fs * 0.75)
        captions.append(
            Caption(
                text=_wrap(layout.cta_text, cta_fs, layout),
                start=q_end,
                end=total,
                font_size=cta_fs,
                y="h*0.78",
            )
        )
    return captions


def build_caption_chain(*, riddle: Riddle, layout: CaptionLayout, font_file: Path) -> FilterChain:
    if not font_file.exists():
        raise MissingAssetError(f"Font file not found: {font_file}")

    w, h = layout.width, layout.height
    chain = FilterChain()
    chain.add("scale", w=w, h=h, force_original_aspect_ratio="increase")
    chain.add("crop", w=w, h=h)
    chain.add("setsar", sar=1)
    chain.add("drawbox", x=0, y=0, w="iw", h="ih", color="black@0.35", t="fill")

    captions = caption_timeline(riddle, layout)
    chain.extend([c.to_filter(font_file) for c in captions])
    chain.add("format", pix_fmts="yuv420p")

    logger.debug(f"[Captions] {len(captions)} captions over {layout.total_seconds:.1f}s")
    return chain
