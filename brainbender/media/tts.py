"""
brainbender/media/tts.py – Narration synthesis
===============================================
Providers:
  edge  : Microsoft Edge neural voices through edge-tts (async, no key)
  http  : any GET endpoint that answers ``?voice=..&text=..`` with audio bytes
  none  : silent video

A configured provider that fails is fatal for the request; there is no
fallback to a silent track.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import edge_tts
import requests
from loguru import logger

from brainbender.errors import SynthesisError
from brainbender.riddles import Riddle

CHUNK_BYTES = 64 * 1024


def narration_text(riddle: Riddle, render_mode: str) -> str:
    # Captions reveal the answer on screen after the countdown.
    if render_mode == "captions":
        return riddle.question
    return f"{riddle.question} ... The answer is: {riddle.answer}"


async def _edge(text: str, voice: str, out_path: Path) -> None:
    comm = edge_tts.Communicate(text=text, voice=voice)
    await comm.save(str(out_path))


def _http_download(text: str, voice: str, url: str, timeout: float, out_path: Path) -> None:
    with requests.get(url, params={"voice": voice, "text": text}, stream=True, timeout=timeout) as resp:
        resp.raise_for_status()
        with open(out_path, "wb") as f:
            for chunk in resp.iter_content(chunk_size=CHUNK_BYTES):
                if chunk:
                    f.write(chunk)


async def synthesize(
    *,
    text: str,
    out_path: Path,
    provider: str,
    voice: str,
    url: str = "",
    timeout: float = 30.0,
) -> Path | None:
    if provider == "none":
        return None

    logger.info(f"[TTS] {provider} | voice={voice} | {len(text)} chars")
    try:
        if provider == "edge":
            await _edge(text, voice, out_path)
        elif provider == "http":
            await asyncio.to_thread(_http_download, text, voice, url, timeout, out_path)
        else:
            raise SynthesisError(f"Unknown TTS provider: {provider}")
    except SynthesisError:
        raise
    except requests.RequestException as e:
        raise SynthesisError(f"TTS download failed: {e}") from e
    except Exception as e:
        raise SynthesisError(f"TTS synthesis failed ({provider}): {e}") from e

    if not out_path.exists() or out_path.stat().st_size == 0:
        raise SynthesisError(f"TTS produced no audio ({provider})")
    return out_path
