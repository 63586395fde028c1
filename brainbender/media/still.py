"""
brainbender/media/still.py – Still-frame renderer
==================================================
Rasterises the riddle (question + answer) onto a vertical canvas:
  - greedy word wrap by measured pixel width, never wider than the text area
  - explicit newlines act as paragraph breaks
  - every line centred horizontally, the whole block centred vertically

The PNG produced here is looped by the encoder for the full video length.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from loguru import logger
from PIL import Image, ImageDraw, ImageFont

from brainbender.errors import MissingAssetError, RenderError

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

BACKGROUND = (0, 0, 0)
TEXT_COLOR = (255, 255, 255)
LINE_SPACING = 10


def load_font(font_file: Path, size: int, explicit: bool = True) -> Font:
    if font_file.exists():
        return ImageFont.truetype(str(font_file), size)
    if explicit:
        raise MissingAssetError(f"Font file not found: {font_file}")
    logger.warning(f"[Still] Default font {font_file} missing, using Pillow built-in font")
    return ImageFont.load_default(size=size)


def measure(text: str, font: Font) -> float:
    dummy = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    return dummy.textlength(text, font=font)


def _split_long_word(word: str, font: Font, max_width: int) -> list[str]:
    pieces: list[str] = []
    current = ""
    for ch in word:
        test = current + ch
        if current and measure(test, font) > max_width:
            pieces.append(current)
            current = ch
        else:
            current = test
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, font: Font, max_width: int) -> list[str]:
    """Word-wrap text to fit within max_width pixels."""
    lines: list[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            if measure(word, font) > max_width:
                if current:
                    lines.append(current)
                *head, current = _split_long_word(word, font, max_width)
                lines.extend(head)
                continue
            test = f"{current} {word}".strip()
            if measure(test, font) <= max_width:
                current = test
            else:
                lines.append(current)
                current = word
        if current:
            lines.append(current)
    return lines


def render_still(
    *,
    text: str,
    out_path: Path,
    size: tuple[int, int],
    font: Font,
    margin: int,
) -> Path:
    width, height = size
    max_width = width - margin * 2
    if max_width <= 0:
        raise RenderError(f"Text margin {margin} leaves no room on a {width}px canvas")

    img = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(img)

    lines = wrap_text(text, font, max_width)
    bbox = draw.textbbox((0, 0), "Ay", font=font)
    line_h = (bbox[3] - bbox[1]) + LINE_SPACING
    total_h = len(lines) * line_h - LINE_SPACING

    y = (height - total_h) / 2
    for line in lines:
        if line:
            x = (width - draw.textlength(line, font=font)) / 2
            draw.text((x, y), line, font=font, fill=TEXT_COLOR)
        y += line_h

    img.save(out_path, format="PNG")
    logger.debug(f"[Still] {len(lines)} lines rendered → {out_path}")
    return out_path
