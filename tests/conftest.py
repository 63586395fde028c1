from __future__ import annotations

import random
from pathlib import Path

import pytest

from brainbender.config import Config
from brainbender.errors import EncoderError
from brainbender.pipeline import RiddlePipeline
from brainbender.riddles import Riddle

ECHO = Riddle(question="I speak without a mouth...", answer="An echo")


class StubEncoder:
    """Pretends to be ffmpeg: writes a few bytes to the output path (last argv entry)."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    async def run(self, args: list[str]) -> None:
        self.calls.append(list(args))
        Path(args[-1]).write_bytes(b"\x00\x00\x00\x18ftypmp42")


class FailingEncoder:
    def __init__(self, stderr: str = "Invalid filter graph: unterminated quote") -> None:
        self.stderr = stderr

    async def run(self, args: list[str]) -> None:
        raise EncoderError("Encoder failed with exit code 1", returncode=1, stderr=self.stderr)


class StubPublisher:
    def __init__(self, video_id: str = "abc123") -> None:
        self.video_id = video_id
        self.uploads: list[dict] = []

    def upload(self, video_path: Path, title: str, description: str, tags: list[str]) -> str:
        assert video_path.exists()
        self.uploads.append({"path": video_path, "title": title, "description": description, "tags": tags})
        return self.video_id


class StubSynthesizer:
    def __init__(self, produce_audio: bool = True) -> None:
        self.produce_audio = produce_audio
        self.texts: list[str] = []

    async def __call__(self, *, text: str, out_path: Path) -> Path | None:
        self.texts.append(text)
        if not self.produce_audio:
            return None
        out_path.write_bytes(b"ID3fake-mp3")
        return out_path


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides) -> Config:
        base = dict(
            host="127.0.0.1",
            port=3000,
            client_id="client-id.apps.googleusercontent.com",
            client_secret="secret",
            redirect_uri="http://localhost:3000/oauth2callback",
            refresh_token="",
            riddles_file=tmp_path / "riddles.json",
            work_dir=tmp_path / "work",
            render_mode="still",
            video_size=(270, 480),
            fps=30,
            still_seconds=20.0,
            question_seconds=4.0,
            countdown_seconds=5,
            answer_seconds=3.0,
            font_file=tmp_path / "no-such-font.ttf",
            font_file_explicit=False,
            font_size=24,
            text_margin=20,
            backgrounds_dir=tmp_path / "backgrounds",
            channel_title="Brain Bender Daily",
            cta_text="Follow for more!",
            tts_provider="none",
            tts_voice="en-US-GuyNeural",
            tts_url="http://tts.invalid/speech",
            tts_timeout=5.0,
            ffmpeg_bin="ffmpeg",
            privacy_status="private",
            category_id="27",
            schedule_times=[],
            schedule_timezone="UTC",
            log_level="DEBUG",
            log_dir=None,
        )
        base.update(overrides)
        return Config(**base)

    return _make


@pytest.fixture
def make_pipeline(make_config):
    def _make(
        *,
        encoder=None,
        publisher=None,
        synthesizer=None,
        riddles=None,
        **cfg_overrides,
    ) -> RiddlePipeline:
        return RiddlePipeline(
            cfg=make_config(**cfg_overrides),
            riddles=riddles if riddles is not None else [ECHO],
            publisher=publisher or StubPublisher(),
            encoder=encoder or StubEncoder(),
            synthesizer=synthesizer or StubSynthesizer(produce_audio=False),
            rng=random.Random(7),
        )

    return _make
