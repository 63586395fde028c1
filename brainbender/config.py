from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from brainbender.utils import env_float, env_int, env_str, parse_clock_times

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_RIDDLES_FILE = PACKAGE_DIR / "data" / "riddles.json"
DEFAULT_FONT_LINUX = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
DEFAULT_REDIRECT_URI = "http://localhost:3000/oauth2callback"
DEFAULT_TTS_URL = "https://api.streamelements.com/kappa/v2/speech"

RENDER_MODES = {"still", "captions"}
TTS_PROVIDERS = {"edge", "http", "none"}
NON_PUBLIC_PRIVACY = {"private", "unlisted"}
MIN_VIDEO_SECONDS = 11.0
MAX_VIDEO_SECONDS = 20.0


def fit_answer_seconds(question: float, countdown: int, answer: float) -> float:
    """Stretch or shrink the answer segment so the captions video lasts 11-20 s."""
    total = question + float(countdown) + answer
    if total < MIN_VIDEO_SECONDS:
        fitted = answer + (MIN_VIDEO_SECONDS - total)
    elif total > MAX_VIDEO_SECONDS:
        fitted = answer - (total - MAX_VIDEO_SECONDS)
    else:
        return answer
    logger.warning(
        f"[Config] Captions total {total:.1f}s is outside {MIN_VIDEO_SECONDS:.0f}-{MAX_VIDEO_SECONDS:.0f}s, "
        f"ANSWER_SECONDS adjusted to {fitted:.1f}"
    )
    return fitted


@dataclass(frozen=True)
class Config:
    host: str
    port: int

    client_id: str
    client_secret: str
    redirect_uri: str
    refresh_token: str

    riddles_file: Path
    work_dir: Path

    render_mode: str
    video_size: tuple[int, int]
    fps: int
    still_seconds: float
    question_seconds: float
    countdown_seconds: int
    answer_seconds: float

    font_file: Path
    font_file_explicit: bool
    font_size: int
    text_margin: int
    backgrounds_dir: Path
    channel_title: str
    cta_text: str

    tts_provider: str
    tts_voice: str
    tts_url: str
    tts_timeout: float

    ffmpeg_bin: str

    privacy_status: str
    category_id: str

    schedule_times: list[tuple[int, int]]
    schedule_timezone: str

    log_level: str
    log_dir: Path | None

    @property
    def oauth_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @property
    def captions_seconds(self) -> float:
        return self.question_seconds + float(self.countdown_seconds) + self.answer_seconds

    @property
    def video_seconds(self) -> float:
        if self.render_mode == "captions":
            return self.captions_seconds
        return self.still_seconds

    @staticmethod
    def from_env() -> "Config":
        load_dotenv()

        render_mode = env_str("RENDER_MODE", "still").lower()
        if render_mode not in RENDER_MODES:
            logger.warning(f"[Config] Unknown RENDER_MODE={render_mode!r}, using 'still'")
            render_mode = "still"

        tts_provider = env_str("TTS_PROVIDER", "edge").lower()
        if tts_provider not in TTS_PROVIDERS:
            logger.warning(f"[Config] Unknown TTS_PROVIDER={tts_provider!r}, using 'none'")
            tts_provider = "none"

        privacy = env_str("YOUTUBE_PRIVACY", "private").lower()
        if privacy not in NON_PUBLIC_PRIVACY:
            logger.warning(f"[Config] YOUTUBE_PRIVACY={privacy!r} is not allowed, uploads stay 'private'")
            privacy = "private"

        question_seconds = env_float("QUESTION_SECONDS", 4.0, 2.0, 8.0)
        countdown_seconds = env_int("COUNTDOWN_SECONDS", 5, 3, 8)
        answer_seconds = fit_answer_seconds(
            question_seconds,
            countdown_seconds,
            env_float("ANSWER_SECONDS", 3.0, 2.0, 6.0),
        )

        font_env = env_str("FONT_FILE")
        log_dir = env_str("LOG_DIR")

        return Config(
            host=env_str("HOST", "0.0.0.0"),
            port=env_int("PORT", 3000, 1, 65535),
            client_id=env_str("YOUTUBE_CLIENT_ID"),
            client_secret=env_str("YOUTUBE_CLIENT_SECRET"),
            redirect_uri=env_str("REDIRECT_URI", DEFAULT_REDIRECT_URI),
            refresh_token=env_str("YOUTUBE_REFRESH_TOKEN"),
            riddles_file=Path(env_str("RIDDLES_FILE", str(DEFAULT_RIDDLES_FILE))),
            work_dir=Path(env_str("WORK_DIR", os.path.join(tempfile.gettempdir(), "brainbender"))),
            render_mode=render_mode,
            video_size=(1080, 1920),
            fps=env_int("VIDEO_FPS", 30, 24, 60),
            still_seconds=env_float("VIDEO_SECONDS", 20.0, MIN_VIDEO_SECONDS, MAX_VIDEO_SECONDS),
            question_seconds=question_seconds,
            countdown_seconds=countdown_seconds,
            answer_seconds=answer_seconds,
            font_file=Path(font_env or DEFAULT_FONT_LINUX),
            font_file_explicit=bool(font_env),
            font_size=env_int("FONT_SIZE", 64, 24, 140),
            text_margin=env_int("TEXT_MARGIN", 50, 0, 300),
            backgrounds_dir=Path(env_str("BACKGROUNDS_DIR", "assets/backgrounds")),
            channel_title=env_str("CHANNEL_TITLE", "Brain Bender Daily"),
            cta_text=env_str("CTA_TEXT", "Follow for a new riddle every day!"),
            tts_provider=tts_provider,
            tts_voice=env_str("TTS_VOICE", "en-US-GuyNeural"),
            tts_url=env_str("TTS_URL", DEFAULT_TTS_URL),
            tts_timeout=env_float("TTS_TIMEOUT", 30.0, 1.0, 300.0),
            ffmpeg_bin=env_str("FFMPEG_BIN", "ffmpeg"),
            privacy_status=privacy,
            category_id=env_str("YOUTUBE_CATEGORY_ID", "27"),
            schedule_times=parse_clock_times(env_str("SCHEDULE_TIMES")),
            schedule_timezone=env_str("SCHEDULE_TIMEZONE", "UTC"),
            log_level=env_str("LOG_LEVEL", "INFO").upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )
