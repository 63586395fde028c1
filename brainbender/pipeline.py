"""
brainbender/pipeline.py – Render-and-publish pipeline
======================================================
One run, strictly sequential:
  1. pick a riddle
  2. render the still frame, or build the caption filter graph over a background
  3. synthesise narration (optional)
  4. encode with ffmpeg
  5. upload, non-public

Every file a run creates belongs to a RenderJob whose cleanup executes on all
exit paths. Blocking work (Pillow, googleapiclient) runs in worker threads so
concurrent runs share the event loop.
"""

from __future__ import annotations

import asyncio
import random
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterator, Protocol

from loguru import logger

from brainbender.config import Config
from brainbender.errors import EncoderError
from brainbender.media.captions import CaptionLayout, build_caption_chain, pick_background
from brainbender.media.encoder import Encoder, build_encoder_args
from brainbender.media.still import load_font, render_still
from brainbender.media.tts import narration_text, synthesize
from brainbender.riddles import Riddle, load_riddles, pick_riddle
from brainbender.utils import ensure_dir, job_suffix
from brainbender.youtube.auth import YouTubeCredentials
from brainbender.youtube.uploader import YouTubePublisher, build_metadata

Synthesizer = Callable[..., Awaitable[Path | None]]


class Publisher(Protocol):
    def upload(self, video_path: Path, title: str, description: str, tags: list[str]) -> str: ...


class VideoEncoder(Protocol):
    async def run(self, args: list[str]) -> None: ...


@dataclass(frozen=True)
class PublishResult:
    question: str
    video_id: str

    def as_json(self) -> dict[str, Any]:
        return {"question": self.question, "videoId": self.video_id}


@dataclass(frozen=True)
class RenderJob:
    image_path: Path
    audio_path: Path
    video_path: Path

    @property
    def paths(self) -> tuple[Path, ...]:
        return (self.image_path, self.audio_path, self.video_path)

    def cleanup(self) -> list[Path]:
        """Delete whatever exists; return the paths that could not be removed."""
        leftovers: list[Path] = []
        for p in self.paths:
            try:
                p.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"[RenderJob] Could not delete {p}: {e}")
                leftovers.append(p)
        return leftovers


@contextmanager
def render_job(work_dir: Path) -> Iterator[RenderJob]:
    ensure_dir(work_dir)
    suffix = job_suffix()
    job = RenderJob(
        image_path=work_dir / f"riddle_{suffix}.png",
        audio_path=work_dir / f"narration_{suffix}.mp3",
        video_path=work_dir / f"riddle_{suffix}.mp4",
    )
    logger.debug(f"[RenderJob] {suffix} opened in {work_dir}")
    try:
        yield job
    finally:
        job.cleanup()


class RiddlePipeline:

    def __init__(
        self,
        cfg: Config,
        riddles: list[Riddle],
        publisher: Publisher,
        encoder: VideoEncoder,
        synthesizer: Synthesizer,
        rng: random.Random | None = None,
    ) -> None:
        self._cfg = cfg
        self._riddles = riddles
        self._publisher = publisher
        self._encoder = encoder
        self._synthesizer = synthesizer
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, cfg: Config, credentials: YouTubeCredentials) -> "RiddlePipeline":
        return cls(
            cfg=cfg,
            riddles=load_riddles(cfg.riddles_file),
            publisher=YouTubePublisher(credentials, category_id=cfg.category_id, privacy_status=cfg.privacy_status),
            encoder=Encoder(cfg.ffmpeg_bin),
            synthesizer=partial(
                synthesize,
                provider=cfg.tts_provider,
                voice=cfg.tts_voice,
                url=cfg.tts_url,
                timeout=cfg.tts_timeout,
            ),
        )

    async def run(self) -> PublishResult:
        cfg = self._cfg
        riddle = pick_riddle(self._riddles, self._rng)
        logger.info(f"[Pipeline] mode={cfg.render_mode} | riddle='{riddle.question[:60]}'")

        with render_job(cfg.work_dir) as job:
            source, video_filter = await self._visual(riddle, job)

            audio = await self._synthesizer(
                text=narration_text(riddle, cfg.render_mode),
                out_path=job.audio_path,
            )

            args = build_encoder_args(
                image_path=source,
                out_path=job.video_path,
                duration=cfg.video_seconds,
                fps=cfg.fps,
                audio_path=audio,
                video_filter=video_filter,
            )
            await self._encoder.run(args)
            if not job.video_path.exists():
                raise EncoderError(f"Encoder exited cleanly but wrote no video: {job.video_path}")

            meta = build_metadata(riddle, cfg.channel_title)
            video_id = await asyncio.to_thread(
                self._publisher.upload,
                job.video_path,
                meta["title"],
                meta["description"],
                meta["tags"],
            )

        logger.success(f"[Pipeline] Published {video_id}")
        return PublishResult(question=riddle.question, video_id=video_id)

    async def _visual(self, riddle: Riddle, job: RenderJob) -> tuple[Path, str | None]:
        cfg = self._cfg
        if cfg.render_mode == "captions":
            background = pick_background(cfg.backgrounds_dir, self._rng)
            w, h = cfg.video_size
            layout = CaptionLayout(
                width=w,
                height=h,
                question_seconds=cfg.question_seconds,
                countdown_seconds=cfg.countdown_seconds,
                answer_seconds=cfg.answer_seconds,
                font_size=cfg.font_size,
                margin=cfg.text_margin,
                channel_title=cfg.channel_title,
                cta_text=cfg.cta_text,
            )
            chain = build_caption_chain(riddle=riddle, layout=layout, font_file=cfg.font_file)
            return background, chain.render()

        font = load_font(cfg.font_file, cfg.font_size, explicit=cfg.font_file_explicit)
        await asyncio.to_thread(
            render_still,
            text=riddle.combined_text,
            out_path=job.image_path,
            size=cfg.video_size,
            font=font,
            margin=cfg.text_margin,
        )
        return job.image_path, None
