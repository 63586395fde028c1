from __future__ import annotations

import asyncio
import shlex
from pathlib import Path

from loguru import logger

from brainbender.errors import EncoderError


def build_encoder_args(
    *,
    image_path: Path,
    out_path: Path,
    duration: float,
    fps: int,
    audio_path: Path | None = None,
    video_filter: str | None = None,
) -> list[str]:
    """ffmpeg arguments (without the binary) for a looped still plus optional narration."""
    args: list[str] = ["-y", "-hide_banner", "-loglevel", "error"]
    args += ["-loop", "1", "-i", str(image_path)]
    if audio_path is not None:
        args += ["-i", str(audio_path)]

    if video_filter:
        args += ["-vf", video_filter]
    if audio_path is not None:
        args += ["-map", "0:v", "-map", "1:a", "-af", "apad"]

    args += [
        "-t",
        f"{duration:.3f}",
        "-r",
        str(fps),
        "-c:v",
        "libx264",
        "-preset",
        "veryfast",
        "-pix_fmt",
        "yuv420p",
    ]
    if audio_path is not None:
        args += ["-c:a", "aac", "-b:a", "128k"]
    args += ["-movflags", "+faststart", str(out_path)]
    return args


class Encoder:
    """Runs ffmpeg as a child process without blocking the event loop."""

    def __init__(self, binary: str = "ffmpeg") -> None:
        self.binary = binary

    async def run(self, args: list[str]) -> None:
        cmd = [self.binary, *args]
        logger.debug(f"[Encoder] {shlex.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise EncoderError(f"Encoder binary not found: {self.binary}") from e

        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise EncoderError(
                f"Encoder failed with exit code {proc.returncode}",
                returncode=proc.returncode,
                stderr=stderr.decode("utf-8", errors="replace"),
            )
        logger.info(f"[Encoder] Wrote {args[-1]}")
